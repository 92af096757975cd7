"""
mas-heavy - parallel multi-agent orchestration over a JSON-RPC stdio server.

Fans a prompt out to several LLM agents, repairs malformed structured
output, scores the surviving candidates and synthesizes one final answer.

Main entry points:
    - mas_heavy.main: CLI entrypoint
    - mas_heavy.core.runner: run_orchestration() for a single run
    - mas_heavy.protocol.server: serve_stdio() for the framed RPC server
    - mas_heavy.models.config: Config and load_env()
"""

__version__ = "0.1.0"
