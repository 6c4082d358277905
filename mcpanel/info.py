__app_name__ = "MCPanel Orchestrator"
__package_name__ = "mcpanel-orchestrator"
__description__ = "HTTP API for provisioning and controlling game server containers"
__author__ = "MCPanel contributors"
__author_email__ = "mcpanel@users.noreply.github.com"
__license__ = "GPL-3.0"
