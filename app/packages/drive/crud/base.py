"""CRUD 基类：为各实体提供通用的数据访问方法。

写操作默认只 ``flush`` 不提交：事务边界由服务层的 ``transaction`` 作用域统一控制，
确保“先校验、后写入”落在同一个事务里。
"""

from typing import Any, Dict, Generic, Optional, Type, TypeVar

from sqlalchemy.orm import Query, Session

from app.packages.drive.models.base import Base

ModelType = TypeVar("ModelType", bound=Base)


class CRUDBase(Generic[ModelType]):
    """封装常见的查询、创建与保存逻辑，减少重复代码。"""

    def __init__(self, model: Type[ModelType]):
        self.model = model

    def query(self, db: Session) -> Query:
        return db.query(self.model)

    def get(self, db: Session, id: Any) -> Optional[ModelType]:
        return self.query(db).filter(self.model.id == id).first()

    def get_for_update(self, db: Session, id: Any) -> Optional[ModelType]:
        """读取并锁定一行（SQLite 下 FOR UPDATE 被忽略）。"""
        return self.query(db).filter(self.model.id == id).with_for_update().first()

    def create(self, db: Session, obj_in: Dict[str, Any]) -> ModelType:
        db_obj = self.model(**obj_in)
        db.add(db_obj)
        db.flush()
        db.refresh(db_obj)
        return db_obj

    def save(self, db: Session, db_obj: ModelType) -> ModelType:
        db.add(db_obj)
        db.flush()
        return db_obj

    def update(self, db: Session, db_obj: ModelType, changes: Dict[str, Any]) -> ModelType:
        """按字段局部更新；未知字段直接报错，避免静默丢弃。"""
        for key, value in changes.items():
            if not hasattr(db_obj, key):
                raise AttributeError(f"{self.model.__name__} has no attribute {key!r}")
            setattr(db_obj, key, value)
        return self.save(db, db_obj)

    def hard_delete(self, db: Session, db_obj: ModelType) -> None:
        """物理删除行；提交由外层事务负责。"""
        db.delete(db_obj)
        db.flush()
