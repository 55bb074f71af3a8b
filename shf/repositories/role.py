from sqlalchemy.orm import Session

from shf.db.models.role import Role as RoleModel

ADMIN = "admin"
MEMBER = "member"


def get_role_by_name(db: Session, name: str) -> RoleModel | None:
    return db.query(RoleModel).filter(RoleModel.name == name).first()
