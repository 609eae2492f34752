from fastapi import APIRouter, Depends, Request, status # Constructor for router, request for ip directions
from fastapi.responses import JSONResponse

from core.config import settings
from core.limiter import limiter
from models.cart_models import MutationOutcome, MutationResult, QuantityUpdateModel, cart_info
from services.cart_service import CartService # The three validated cart mutations


router = APIRouter(prefix="/cart", tags=["Cart"]) # All endpoints will start with /cart and tagged as Cart

OUTCOME_STATUS = {
    MutationOutcome.COMMITTED: status.HTTP_200_OK,
    MutationOutcome.IGNORED: status.HTTP_200_OK,
    MutationOutcome.OUT_OF_STOCK: status.HTTP_409_CONFLICT,
    MutationOutcome.NOT_IN_CART: status.HTTP_404_NOT_FOUND,
    MutationOutcome.SERVICE_FAILURE: status.HTTP_502_BAD_GATEWAY,
    MutationOutcome.STORAGE_FAILURE: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def get_cart_service(request: Request) -> CartService:
    return request.app.state.cart_service


def mutation_response(result: MutationResult) -> JSONResponse:
    return JSONResponse(
        status_code = OUTCOME_STATUS[result.outcome],
        content={
            "outcome": result.outcome.value,
            "detail": result.message,
            "cart_info": cart_info(result.items),
        }
    )


@router.get("", status_code = status.HTTP_200_OK, include_in_schema=True)
@limiter.limit(settings.RATE_LIMIT)
async def retrieve_cart_router (
    request: Request,
    cart_service: CartService = Depends(get_cart_service)
    ):
    """Endpoint to retrieve the whole cart."""

    return JSONResponse(
        status_code = status.HTTP_200_OK,
        content={"cart_info": cart_info(cart_service.items)}
    )


@router.post("/items/{item_id}", status_code = status.HTTP_200_OK, include_in_schema=True)
@limiter.limit(settings.RATE_LIMIT)
async def add_item_router (
    item_id: int,
    request: Request,
    cart_service: CartService = Depends(get_cart_service)
    ):
    """Endpoint to add one unit of an item to the cart."""

    return mutation_response(await cart_service.add_item(item_id))


@router.put("/items/{item_id}", status_code = status.HTTP_200_OK, include_in_schema=True)
@limiter.limit(settings.RATE_LIMIT)
async def set_quantity_router (
    item_id: int,
    body: QuantityUpdateModel,
    request: Request,
    cart_service: CartService = Depends(get_cart_service)
    ):
    """Endpoint to set the quantity of an item already in the cart."""

    return mutation_response(await cart_service.set_quantity(item_id, body.amount))


@router.delete("/items/{item_id}", status_code = status.HTTP_200_OK, include_in_schema=True)
@limiter.limit(settings.RATE_LIMIT)
async def remove_item_router (
    item_id: int,
    request: Request,
    cart_service: CartService = Depends(get_cart_service)
    ):
    """Endpoint to remove an item from the cart."""

    return mutation_response(await cart_service.remove_item(item_id))
