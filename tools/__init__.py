from .mcp_server import mcp, run_server, format_response

__all__ = ['mcp', 'run_server', 'format_response']
