from app.web.routes import create_app

__all__ = ["create_app"]
