"""Stdio tool server.

This subpackage exposes the orchestration engine as JSON-RPC tools over
a Content-Length framed byte stream.

Key modules:
    - framing: Message encoding and incremental decoding
    - tools: Tool definitions and their input schemas
    - server: Request dispatch and the stdio entry point
"""

from mas_heavy.protocol.framing import (
    Frame,
    FrameError,
    FrameDecoder,
    encode_message,
)
from mas_heavy.protocol.tools import tool_definitions
from mas_heavy.protocol.server import ProtocolServer, RpcError, serve_stdio

__all__ = [
    "Frame",
    "FrameError",
    "FrameDecoder",
    "encode_message",
    "tool_definitions",
    "ProtocolServer",
    "RpcError",
    "serve_stdio",
]
