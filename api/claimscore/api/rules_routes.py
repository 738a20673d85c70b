from typing import List

from fastapi import APIRouter, Depends, HTTPException

from claimscore.models.documents import EvaluateFieldsRequest
from claimscore.models.rules import ClaimVerdict, Rule, RuleCreate, RuleUpdate
from claimscore.services.storage import MemStorage, get_storage
from claimscore.services.validation_rules import evaluate_claim

router = APIRouter(prefix="/rules", tags=["rules"])


@router.get("", response_model=List[Rule])
def list_rules(store: MemStorage = Depends(get_storage)) -> List[Rule]:
    return store.get_rules()


@router.post("", response_model=Rule)
def create_rule(req: RuleCreate, store: MemStorage = Depends(get_storage)) -> Rule:
    return store.create_rule(req)


@router.patch("/{rule_id}", response_model=Rule)
def update_rule(rule_id: str, req: RuleUpdate, store: MemStorage = Depends(get_storage)) -> Rule:
    rule = store.update_rule(rule_id, req)
    if rule is None:
        raise HTTPException(status_code=404, detail="Rule not found")
    return rule


@router.delete("/{rule_id}")
def delete_rule(rule_id: str, store: MemStorage = Depends(get_storage)) -> dict:
    if not store.delete_rule(rule_id):
        raise HTTPException(status_code=404, detail="Rule not found")
    return {"success": True}


@router.post("/evaluate", response_model=ClaimVerdict)
def evaluate(req: EvaluateFieldsRequest, store: MemStorage = Depends(get_storage)) -> ClaimVerdict:
    # Disabled rules are stored but never gate a claim
    return evaluate_claim(req.fields, store.get_enabled_rules())
