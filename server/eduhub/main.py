from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from eduhub.config import settings
from eduhub.services.notifications import DeadlineWatcher
from eduhub.services.sse_manager import notification_manager
from eduhub.services.sweeper import ExpirationSweeper
from eduhub.storage import store

# Initialize FastAPI app
app = FastAPI(
    title=settings.app_name,
    version=settings.api_version,
    debug=settings.debug
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

expiration_sweeper = ExpirationSweeper(store, interval_seconds=settings.expiry_sweep_interval_seconds)
deadline_watcher = DeadlineWatcher(
    store,
    notification_manager,
    interval_seconds=settings.deadline_check_interval_seconds,
    warning_hours=settings.deadline_warning_hours,
)


@app.on_event("startup")
async def startup_event():
    """Load collections, sweep expired courses once, start the timers"""
    store.kv.init()
    await store.load()
    await expiration_sweeper.run_once()

    expiration_sweeper.start()
    deadline_watcher.start()

    print(f"🚀 {settings.app_name} is starting...")
    print(f"📚 Database: {settings.database_url}")
    print(f"🤖 AI Model: {settings.openai_model}")


@app.on_event("shutdown")
async def shutdown_event():
    """Cancel every timer so nothing acts on stale state"""
    expiration_sweeper.stop()
    deadline_watcher.stop()
    store.exams.close_all()


@app.get("/")
async def root():
    """Root endpoint"""
    return {
        "message": f"Welcome to {settings.app_name}",
        "version": settings.api_version,
        "status": "running"
    }


@app.get("/health")
async def health_check():
    """Health check endpoint"""
    return {"status": "healthy"}


# Import and include routers
from eduhub.routes import activation, assistant, auth, courses, events, exam, platform, users  # noqa: E402

app.include_router(auth.router, prefix="/api", tags=["Auth"])
app.include_router(users.router, prefix="/api", tags=["Users"])
app.include_router(courses.router, prefix="/api", tags=["Courses"])
app.include_router(activation.router, prefix="/api", tags=["Activation"])
app.include_router(exam.router, prefix="/api", tags=["Exam"])
app.include_router(assistant.router, prefix="/api", tags=["Assistant"])
app.include_router(platform.router, prefix="/api", tags=["Config"])
app.include_router(events.router, prefix="/api", tags=["Events"])
