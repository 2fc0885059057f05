# API module
# REST API for floor plan recognition:
# - Upload endpoint returning the recognition result
# - Planning project submission/retrieval

from .server import create_app

__all__ = ["create_app"]
