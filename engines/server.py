"""
ClubOps Payroll Engines - MCP Server

FastMCP server exposing compensation calculation tools:
- Salary Engine: shift salary from a compensation scheme and shift metrics
- Maintenance KPI: equipment maintenance bonus accrual and monthly rating
"""

import logging

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

# Import the MCP instance and tools from tool modules
# This registers all the tools with the MCP server
from engines.tools.salary_engine import mcp  # noqa: E402
from engines.tools.kpi_engine import *  # noqa: E402, F401, F403


def main():
    """Run the MCP server."""
    logger.info("Starting ClubOps Payroll Engines MCP Server")
    mcp.run()


if __name__ == "__main__":
    main()
