"""Activity CRUD。"""

from app.packages.drive.crud.base import CRUDBase
from app.packages.drive.models.activity import Activity

activity_crud = CRUDBase(Activity)
