from .app import AUCTION_PATH, build_app, create_app, run_server
from .sender import BackendSender

__all__ = ["AUCTION_PATH", "BackendSender", "build_app", "create_app", "run_server"]
