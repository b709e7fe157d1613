from api.codes.orm.upload_code_model import UploadCodeModel

__all__ = ["UploadCodeModel"]
