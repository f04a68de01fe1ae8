"""
spockscan.config.defaults - Default configuration values.
"""

CONFIG_FILE_NAME = ".spockscan.toml"
ENV_PREFIX = "SPOCKSCAN_"

DEFAULT_CONFIG = {
    "discovery": {
        "test_dirs": ["src/test/groovy"],
        "patterns": ["**/*Spec.groovy", "**/*Test.groovy"],
        "ignore": ["bin", "build", "target", ".gradle"],
    },
    "results": {
        "build_tool": "auto",
        "report_dir": "",
    },
}
