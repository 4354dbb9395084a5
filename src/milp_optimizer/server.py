from __future__ import annotations

import logging
import os

from mcp.server.fastmcp import FastMCP
from mcp.server.transport_security import TransportSecuritySettings

from .errors import ModelFileError
from .parser import parse_file, parse_text
from .schemas import LPModel, SolveOptions
from .solvers.mip.branch_and_cut import solve_mip

logger = logging.getLogger(__name__)

app = FastMCP("MILP Optimizer")


def _solve(model: LPModel, options: SolveOptions | None, use_or_tools: bool) -> dict:
    opts = options or SolveOptions(return_duals=False)
    try:
        solution = solve_mip(model, opts, use_or_tools=use_or_tools)
    except ValueError as exc:
        return {
            "error": f"Failed to solve model: {exc}",
            "model": model.model_dump(),
            "solution": None,
        }
    return {
        "model": model.model_dump(),
        "solution": solution.model_dump(),
    }


@app.tool()
def parse_model_text(text: str) -> dict:
    """Parse model-file text (Max/Min, objective, constraints, sections) into JSON."""
    try:
        model = parse_text(text)
    except ModelFileError as exc:
        return {"error": str(exc), "model": None}
    return {"model": model.model_dump()}


@app.tool()
def solve_model_text(
    text: str,
    options: SolveOptions | None = None,
    use_or_tools: bool = False,
) -> dict:
    """Parse model-file text and solve it (branch-and-bound, or OR-Tools if requested)."""
    try:
        model = parse_text(text)
    except ModelFileError as exc:
        return {"error": f"Failed to parse model: {exc}", "model": None, "solution": None}
    return _solve(model, options, use_or_tools)


@app.tool()
def solve_model_file(
    path: str,
    options: SolveOptions | None = None,
    use_or_tools: bool = False,
) -> dict:
    """Read a model file from disk and solve it."""
    try:
        model = parse_file(path)
    except ModelFileError as exc:
        return {"error": f"Failed to parse model: {exc}", "model": None, "solution": None}
    return _solve(model, options, use_or_tools)


if __name__ == "__main__":
    import sys

    logging.basicConfig(level=os.environ.get("LOG_LEVEL", "INFO"))
    transport = os.environ.get("MCP_TRANSPORT", "stdio")

    if transport == "stdio" or "--stdio" in sys.argv:
        app.run(transport="stdio")
    else:
        port = int(os.environ.get("PORT", "8081"))
        logger.info(f"Serving streamable HTTP on port {port}")
        app.settings.host = "0.0.0.0"
        app.settings.port = port
        app.settings.streamable_http_path = "/mcp"
        app.settings.transport_security = TransportSecuritySettings(
            enable_dns_rebinding_protection=False,
            allowed_hosts=["*"],
            allowed_origins=["*"],
        )
        app.run(transport="streamable-http")
