"""API endpoints for state and LGA reference data."""

from fastapi import APIRouter

from ...errors import NotFound
from ...nigeria import NIGERIAN_STATES, get_lgas_for_state, get_state_by_id

router = APIRouter()


@router.get("/states")
async def list_states():
    return [{"id": s.id, "name": s.name, "code": s.code} for s in NIGERIAN_STATES]


@router.get("/states/{state_id}/lgas")
async def list_lgas(state_id: int):
    """LGAs on record for a state; empty for states without LGA data."""
    if get_state_by_id(state_id) is None:
        raise NotFound("State not found")
    return [{"id": lga.id, "name": lga.name, "stateId": lga.state_id} for lga in get_lgas_for_state(state_id)]
