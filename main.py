# main.py
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
import uvicorn
import logging

# Set up logging
logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(levelname)s - %(message)s')
logger = logging.getLogger(__name__)

from reminder_config import local_scheduler_enabled
from reminder_handler import check_reminders
import reminder_scheduler

app = FastAPI()


@app.on_event("startup")
async def start_local_scheduler():
    if local_scheduler_enabled():
        reminder_scheduler.start_scheduler()


@app.on_event("shutdown")
async def stop_local_scheduler():
    reminder_scheduler.stop_scheduler()


# Health check
@app.get("/")
async def read_root():
    return {"message": "To-Do reminder service is running!"}


# Every method is routed here so unsupported ones get the handler's 405 body
@app.api_route("/api/check-reminders", methods=["GET", "POST", "PUT", "PATCH", "DELETE"])
def check_reminders_endpoint(request: Request):
    """
    Checks for due task reminders and sends WhatsApp notifications.
    Called every minute by the cron trigger (GET) or manually (POST).
    """
    status_code, body = check_reminders(request.method, request.headers)
    return JSONResponse(status_code=status_code, content=body)


if __name__ == "__main__":
    uvicorn.run(app, host="0.0.0.0", port=8000)
