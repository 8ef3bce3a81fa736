from app.services.mux.client import MuxClient, MuxError, get_mux_client

__all__ = ["MuxClient", "MuxError", "get_mux_client"]
