from sqlalchemy.orm import Session

from shf.db.models.geography import Kommun as KommunModel
from shf.db.models.geography import Region as RegionModel


def get_region_by_id(db: Session, region_id: int) -> RegionModel | None:
    return db.query(RegionModel).filter(RegionModel.id == region_id).first()


def get_kommun_by_id(db: Session, kommun_id: int) -> KommunModel | None:
    return db.query(KommunModel).filter(KommunModel.id == kommun_id).first()


def get_or_create_region(db: Session, name: str) -> RegionModel:
    region = db.query(RegionModel).filter(RegionModel.name == name).first()
    if region is None:
        region = RegionModel(name=name)
        db.add(region)
        db.flush()
    return region


def get_or_create_kommun(db: Session, name: str) -> KommunModel:
    kommun = db.query(KommunModel).filter(KommunModel.name == name).first()
    if kommun is None:
        kommun = KommunModel(name=name)
        db.add(kommun)
        db.flush()
    return kommun
