from fastapi import APIRouter, UploadFile, File, Form, HTTPException, status
from typing import List, Optional
import logging

from app.schemas.pharma_schema import PharmaGuardResponse, ParsedVariant, VcfParseResponse
from app.services.pharmacogenomics.config import get_config
from app.services.pipeline.analysis_pipeline import (
    UploadValidationError,
    parse_only,
    run_analysis_pipeline,
)

router = APIRouter()
logger = logging.getLogger(__name__)


@router.post(
    "/analyse",
    response_model=List[PharmaGuardResponse],
    status_code=status.HTTP_200_OK,
    summary="Analyse Pharmacogenomic Risk",
    description="Upload a VCF file and a comma-separated drug list to receive one risk assessment per drug."
)
async def analyse_vcf(
    file: Optional[UploadFile] = File(None, description="Patient's VCF file containing genetic variants"),
    drugs: str = Form("", description="Comma-separated drug names (e.g. CODEINE,WARFARIN)"),
) -> List[PharmaGuardResponse]:
    """
    - **file**: Genetic data file (.vcf, max 5 MB)
    - **drugs**: Target drug names, results are returned in this order
    """
    filename = file.filename if file else None
    content = await file.read() if file else None

    try:
        return await run_analysis_pipeline(filename, content, drugs)

    except UploadValidationError as ve:
        logger.error(f"Validation error in pipeline: {str(ve)}")
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(ve)
        )
    except Exception as e:
        logger.exception(f"Unexpected error in analysis pipeline: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="An error occurred during the analysis pipeline."
        )


@router.post("/parse", response_model=VcfParseResponse, summary="Raw VCF parse (dev only)")
async def parse_vcf_upload(file: Optional[UploadFile] = File(None)) -> VcfParseResponse:
    """Parser output without interpretation. Disabled unless dev endpoints are enabled."""
    if not get_config().dev_endpoints_enabled:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Not Found")

    filename = file.filename if file else None
    content = await file.read() if file else None

    try:
        result = parse_only(filename, content)
    except UploadValidationError as ve:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(ve))

    return VcfParseResponse(
        variants=[ParsedVariant(**v.to_dict()) for v in result.variants],
        metadata=dict(result.metadata),
        errors=list(result.errors),
    )
