from api.links.orm.download_link_model import DownloadLinkModel

__all__ = ["DownloadLinkModel"]
