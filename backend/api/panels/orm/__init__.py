from api.panels.orm.panel_model import PanelModel

__all__ = ["PanelModel"]
