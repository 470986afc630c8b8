# Nano Banana MCP Server - Gemini image generation over MCP
# Copyright (C) 2025 brokechubb
# 
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
# 
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU General Public License for more details.
# 
# You should have received a copy of the GNU General Public License
# along with this program.  If not, see <https://www.gnu.org/licenses/>.

from config import LOG_FILE_PATH, LOG_LEVEL, LOG_TO_FILE
from utils.logging_config import setup_logging
import logging
import sys

# Logs go to stderr (and optionally a file); stdout belongs to the MCP transport
setup_logging(LOG_LEVEL, log_to_file=LOG_TO_FILE, log_file_path=LOG_FILE_PATH)

# Get logger for main module
logger = logging.getLogger(__name__)


def main():
    """Start the MCP server on stdio"""
    from ai.provider_manager import image_provider_manager
    from tools.mcp_server import run_server

    image_provider_manager.log_provider_status()

    try:
        run_server()
    except KeyboardInterrupt:
        logger.info("🛑 Received shutdown signal...")
    return 0


if __name__ == "__main__":
    sys.exit(main())
