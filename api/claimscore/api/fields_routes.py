from typing import List

from fastapi import APIRouter, Depends, HTTPException

from claimscore.models.documents import FieldDefinition, FieldDefinitionCreate, FieldDefinitionUpdate
from claimscore.services.storage import MemStorage, get_storage

router = APIRouter(prefix="/fields", tags=["fields"])


@router.get("", response_model=List[FieldDefinition])
def list_fields(store: MemStorage = Depends(get_storage)) -> List[FieldDefinition]:
    return store.get_field_definitions()


@router.post("", response_model=FieldDefinition)
def create_field(req: FieldDefinitionCreate, store: MemStorage = Depends(get_storage)) -> FieldDefinition:
    return store.create_field_definition(req)


@router.post("/reset", response_model=List[FieldDefinition])
def reset_fields(store: MemStorage = Depends(get_storage)) -> List[FieldDefinition]:
    return store.reset_field_definitions()


@router.patch("/{field_id}", response_model=FieldDefinition)
def update_field(
    field_id: str,
    req: FieldDefinitionUpdate,
    store: MemStorage = Depends(get_storage),
) -> FieldDefinition:
    field = store.update_field_definition(field_id, req)
    if field is None:
        raise HTTPException(status_code=404, detail="Field not found")
    return field


@router.delete("/{field_id}")
def delete_field(field_id: str, store: MemStorage = Depends(get_storage)) -> dict:
    if not store.delete_field_definition(field_id):
        raise HTTPException(status_code=404, detail="Field not found")
    return {"success": True}
