from fastapi import APIRouter, Depends, HTTPException

from eduhub.schemas import (
    AnswerRequest, ExamResult, ExamSessionView, NavigateRequest, SubmitRequest, User,
)
from eduhub.routes.deps import get_current_user
from eduhub.services import catalog, entitlement
from eduhub.services.exam_session import ExamSession, ExamStatus
from eduhub.services.sse_manager import notification_manager
from eduhub.storage import store

router = APIRouter(tags=["Exam"])


def _view(session: ExamSession) -> ExamSessionView:
    return ExamSessionView(
        exam_id=session.exam.id,
        status=session.status.value,
        current_index=session.current_index,
        total_questions=session.total_questions,
        remaining_seconds=session.remaining_seconds,
        answers=session.answers,
        result=session.result,
    )


def _session_or_404(user: User) -> ExamSession:
    session = store.exams.get(user.id)
    if session is None:
        raise HTTPException(status_code=404, detail="No exam in progress")
    return session


@router.post("/exam/{course_id}/{exam_id}/start", response_model=ExamSessionView)
async def start_exam(course_id: str, exam_id: str, user: User = Depends(get_current_user)):
    """
    Start a timed exam. An exam without questions comes back NOT_READY
    with a (0, 0) result and no countdown.
    """
    course = catalog.find_course(store.courses, course_id)
    if course is None:
        raise HTTPException(status_code=404, detail="Course not found")
    if not entitlement.can_access(user, course):
        raise HTTPException(status_code=403, detail="Activate this course to take its exams")
    exam = catalog.find_exam(course, exam_id)
    if exam is None:
        raise HTTPException(status_code=404, detail="Exam not found")

    def on_finish(result: ExamResult) -> None:
        notification_manager.alert(
            user.id,
            "Exam finished! 📝",
            f"Your score in {exam.title or exam.id}: {result.score}/{result.total}",
        )

    session = store.exams.start(user.id, exam, on_finish=on_finish)
    if session is None:
        raise HTTPException(status_code=409, detail="Another exam is already in progress")
    if session.status == ExamStatus.NOT_READY:
        print(f"⚠️ Exam {exam.id} has no questions yet")
    return _view(session)


@router.get("/exam/session", response_model=ExamSessionView)
async def get_session(user: User = Depends(get_current_user)):
    return _view(_session_or_404(user))


@router.post("/exam/session/answer", response_model=ExamSessionView)
async def select_answer(request: AnswerRequest, user: User = Depends(get_current_user)):
    session = _session_or_404(user)
    session.select_answer(request.question_id, request.answer)
    return _view(session)


@router.post("/exam/session/navigate", response_model=ExamSessionView)
async def navigate(request: NavigateRequest, user: User = Depends(get_current_user)):
    session = _session_or_404(user)
    session.navigate(request.direction)
    return _view(session)


@router.post("/exam/session/submit", response_model=ExamSessionView)
async def submit(request: SubmitRequest, user: User = Depends(get_current_user)):
    """
    Hand in the exam. Requires confirm=true; if the timer already
    submitted, the finished session is returned unchanged.
    """
    session = _session_or_404(user)
    if session.status == ExamStatus.NOT_READY:
        session.dismiss()
        return _view(session)
    if not request.confirm and session.status == ExamStatus.IN_PROGRESS:
        raise HTTPException(status_code=409, detail="Confirm that you want to finish the exam")
    session.submit(request.confirm)
    return _view(session)


@router.delete("/exam/session")
async def abandon(user: User = Depends(get_current_user)):
    """Close the exam without grading. Nothing is recorded."""
    _session_or_404(user)
    store.exams.discard(user.id)
    return {"success": True}


@router.get("/exam/result", response_model=ExamResult)
async def last_result(user: User = Depends(get_current_user)):
    result = store.exams.results.get(user.id)
    if result is None:
        raise HTTPException(status_code=404, detail="No exam result yet")
    return result
