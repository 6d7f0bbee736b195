import logging

from fastapi import APIRouter, Request

from .. import schemas
from ..config import settings
from ..limiter import limiter
from ..numerology_theme import BirthRecord, compute_numerology

router = APIRouter(prefix="/v1/numerology", tags=["numerology"])
logger = logging.getLogger("numerology.router")


@router.post(
    "/calculate",
    response_model=schemas.NumerologyThemeResponse,
    responses={422: {"model": schemas.NumerologyErrorResponse}},
)
@limiter.limit(settings.numerology_rate_limit)
async def calculate_numerology(
    request: Request,
    payload: schemas.NumerologyCalculateRequest,
):
    """Compute every figure of the theme together with its calculation lines.

    Engine errors propagate to the app-level handlers, which turn them into
    ``{"detail", "code"}`` responses.
    """
    include_debug = payload.include_debug or settings.numerology_debug
    logger.info(
        "Numerology calculate | birth_date=%s | target_year=%s | debug=%s",
        payload.birth_date,
        payload.target_year,
        include_debug,
    )

    record = BirthRecord(
        first_name=payload.first_name,
        family_name=payload.family_name,
        birth_date=payload.birth_date,
        middle_names=payload.middle_names,
        marital_name=payload.marital_name,
    )
    result = compute_numerology(
        record,
        target_year=payload.target_year,
        include_debug=include_debug,
    )
    logger.info(
        "Numerology done | life_path=%s | expression=%s | overrides=%s",
        result.life_path.reduced,
        result.expression.reduced,
        len(result.overrides_applied),
    )
    return result.to_dict()
