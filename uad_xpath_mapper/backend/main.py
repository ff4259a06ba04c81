"""
UAD XPath Mapper - Backend API
XPath generation, mapping building and category sync over HTTP
"""
from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.routing import APIRouter
from pydantic import BaseModel, Field, ValidationError
from typing import Any, Dict, List, Optional
import logging

from .. import __version__
from .config import XPathOptions
from .errors import ConfigurationError, InputParseError, XPathMapperError
from .image_sync import CATEGORY_CHILD, IMAGE_TAG, KEY_CHILD, render_document, sync_image_categories
from .mappings import MappingStyle, build_mappings, render_mappings
from .xml_parser import XMLParser
from .xpath_generator import XPathGenerator

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

api_router = APIRouter(prefix="/api", tags=["api"])


# ============================================================================
# Request/Response Models
# ============================================================================

class XPathRequest(BaseModel):
    xml: str
    options: Dict[str, Any] = Field(default_factory=dict)


class XPathQueryRequest(BaseModel):
    xml: str
    xpath: str
    namespace_prefix: Optional[str] = "d"


class MappingRequest(BaseModel):
    text: str
    style: MappingStyle = MappingStyle.IMAGE
    image_source: Optional[str] = None
    wrap_prefix: Optional[str] = None


class ImageSyncRequest(BaseModel):
    source_xml: str
    target_xml: str
    image_tag: str = IMAGE_TAG
    key_child: str = KEY_CHILD
    category_child: str = CATEGORY_CHILD


class XPathResponse(BaseModel):
    success: bool = True
    count: int
    total_leaves: int
    included_leaves: int
    lines: List[str]


# ============================================================================
# Endpoints
# ============================================================================

def _request_options(raw: Dict[str, Any]) -> XPathOptions:
    """Validate request options; invalid values raise ConfigurationError"""
    try:
        return XPathOptions.model_validate(raw)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid options: {e}") from e


@api_router.get("/")
async def root():
    """API root endpoint"""
    return {
        "name": "UAD XPath Mapper API",
        "version": __version__,
        "status": "running",
        "features": [
            "Leaf-to-XPath generation",
            "XPath query against a document",
            "Image / metadata mapping files",
            "Image category sync"
        ]
    }


@api_router.post("/xpaths", response_model=XPathResponse)
async def generate_xpaths(request: XPathRequest):
    """
    Generate `text : xpath` lines for a document

    Args:
        request: XML content and generator options

    Returns:
        Lines plus leaf statistics
    """
    try:
        options = _request_options(request.options)
        root_element = XMLParser.parse_xml(request.xml)
        result = XPathGenerator(options).generate(root_element)
        logger.info(f"Generated {result.count} line(s) from {result.total_leaves} leaves")
        return XPathResponse(
            count=result.count,
            total_leaves=result.total_leaves,
            included_leaves=result.included_leaves,
            lines=result.rendered(),
        )
    except (InputParseError, ConfigurationError) as e:
        logger.error(f"Rejected XPath request: {e}")
        raise HTTPException(status_code=400, detail=str(e))
    except XPathMapperError as e:
        logger.error(f"Error generating XPaths: {e}")
        raise HTTPException(status_code=500, detail=str(e))


@api_router.post("/xpath/query")
async def query_xpath(request: XPathQueryRequest):
    """
    Query elements using XPath

    Returns:
        XPath query results
    """
    result = XMLParser.query_xpath(request.xml, request.xpath, request.namespace_prefix)
    if not result['success']:
        raise HTTPException(status_code=400, detail=result.get('error', 'XPath query failed'))
    return result


@api_router.post("/mappings")
async def build_mapping_document(request: MappingRequest):
    """Build an <ImageMappings> document from `KEY : VALUE` text"""
    mapping_root = build_mappings(request.text, request.style, request.image_source, request.wrap_prefix)
    return {
        "success": True,
        "count": len(mapping_root),
        "xml": render_mappings(mapping_root),
    }


@api_router.post("/images/sync")
async def sync_images(request: ImageSyncRequest):
    """Copy image categories from the source document into the target document"""
    try:
        source = XMLParser.parse_xml(request.source_xml)
        target = XMLParser.parse_xml(request.target_xml)
    except InputParseError as e:
        logger.error(f"Error parsing XML: {e}")
        raise HTTPException(status_code=400, detail=str(e))

    updates = sync_image_categories(
        source, target,
        image_tag=request.image_tag,
        key_child=request.key_child,
        category_child=request.category_child,
    )
    return {
        "success": True,
        "updates": updates,
        "xml": render_document(target),
    }


# ============================================================================
# App Factory
# ============================================================================

def create_app() -> FastAPI:
    """Create FastAPI app"""
    app = FastAPI(title="UAD XPath Mapper API", version=__version__)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["http://localhost:5173", "http://localhost:3000", "http://127.0.0.1:8000"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(api_router)
    return app
