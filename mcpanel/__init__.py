import sys
import os
import argparse
from pydantic import ValidationError
from mcpanel.manager import McPanelManager
from mcpanel.exceptions import McPanelRuntimeError
from mcpanel.info import __app_name__, __description__

__version__ = ""
with open(os.path.join(os.path.dirname(__file__), "VERSION"), "r") as f:
    __version__ = f.read().strip()


def main():
    # get args from command line
    parser = argparse.ArgumentParser(description=__description__)

    parser.add_argument("--config", dest="config_file", help="Path to the config file")
    parser.add_argument("--log", dest="log_file", help="Log file where to write logs")
    parser.add_argument("--log-level", dest="log_level", help="Log level", choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"])
    parser.add_argument("--version", action="version", version=f"{__app_name__} {__version__}")

    args = parser.parse_args()

    try:
        mcpanel = McPanelManager(
            log_file=args.log_file or "",
            log_level=args.log_level or "",
            config_file=args.config_file or "",
        )
    except ValidationError as e:
        print(f"Configuration file contains {e.error_count()} error(s):")

        for error in e.errors(include_url=False):
            loc = ".".join(str(x) for x in error["loc"]) if error["loc"] else "general"
            print(f"  - {loc}: {error['msg']}")

        print(f"\nCheck documentation for more information on how to configure {__app_name__}")
        sys.exit(2)
    except McPanelRuntimeError as e:
        print(f"Error: {e}")
        sys.exit(2)

    mcpanel.run()

    sys.exit(0)
