from fastapi import APIRouter

from ticketpoint.api.routes import health, users, tickets, bookings, payments, admin

api_router = APIRouter()
api_router.include_router(health.router, prefix="/health", tags=["health"])  # GET /
api_router.include_router(users.router, prefix="/user", tags=["users"])  # POST "", GET /role, GET /{email}
api_router.include_router(tickets.router, tags=["tickets"])  # /tickets, /latest-ticket, /advertised-tickets
api_router.include_router(bookings.router, tags=["bookings"])  # /booked-tickets, /vendor/..., /bookings/...
api_router.include_router(payments.router, tags=["payments"])  # /create-checkout-session, /payment-success, /transactions
api_router.include_router(admin.router, prefix="/admin", tags=["admin"])  # moderation
