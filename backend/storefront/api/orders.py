"""
Orders API Endpoints
Buyer dashboard: the signed-in user's own orders
"""
from fastapi import APIRouter, Depends, HTTPException, Query

from storefront.core.auth import TokenUser, get_current_user
from storefront.repositories.order_repository import OrderRepository

router = APIRouter()


def get_order_repository() -> OrderRepository:
    return OrderRepository()


@router.get("/")
def get_orders(
    limit: int = Query(50, ge=1, le=500),
    user: TokenUser = Depends(get_current_user),
    repo: OrderRepository = Depends(get_order_repository)
):
    """
    Get the authenticated buyer's orders, newest first
    """
    try:
        orders = repo.find_by_buyer(user.id, limit=limit)

        return {
            "status": "success",
            "count": len(orders),
            "data": [order.to_dict() for order in orders]
        }

    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error fetching orders: {str(e)}")
