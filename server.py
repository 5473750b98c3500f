"""
MCP server for single-phase pipe pressure drop calculations.

Steam, air, generic gas and water/condensate lines: IF97 property estimation
with manual fallback, Darcy-Weisbach pressure drop with fittings, velocity
sizing and parameter sweeps.
"""

import logging
from mcp.server.fastmcp import FastMCP

# Configure logging
logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(name)s - %(levelname)s - %(message)s')
logger = logging.getLogger("pipeflow-mcp")

# Initialize the MCP server
mcp = FastMCP("pipeflow-calculator")

from omnitools.pipe_flow import pipe_flow
from omnitools.pipe_sizing import pipe_sizing
from omnitools.parameter_sweep import parameter_sweep
from omnitools.properties import properties

# Register omnitools with MCP
mcp.tool()(pipe_flow)
mcp.tool()(pipe_sizing)
mcp.tool()(parameter_sweep)
mcp.tool()(properties)

from utils.import_helpers import COOLPROP_AVAILABLE, get_coolprop_version
from utils.config import default_config


def main():
    logger.info("Starting pipeflow MCP server...")
    logger.info("CoolProp available: %s (version %s)", COOLPROP_AVAILABLE, get_coolprop_version())

    # Fail at startup, not on the first tool call, when the config file is bad
    config = default_config()
    logger.info("Unit system: %s, pressure input: %s", config.unit_system.value, config.pressure_mode.value)

    logger.info("Registered omnitools:")
    logger.info("  - pipe_flow: Pressure drop through pipe and fittings")
    logger.info("  - pipe_sizing: Inner diameter for a target velocity")
    logger.info("  - parameter_sweep: Sweeps over flow, diameter or length")
    logger.info("  - properties: Fluid, saturation and pipe lookups")

    # Start the server
    mcp.run()


if __name__ == "__main__":
    main()
