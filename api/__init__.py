from .render_api import RenderAPI, RenderConfigBuilder

__all__ = ["RenderAPI", "RenderConfigBuilder"]
