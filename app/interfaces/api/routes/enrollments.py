"""Endpoints to enroll in courses and check enrollment status."""

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from sqlalchemy.orm import Session

from app.application.use_cases.enrollments import (
    CourseNotFoundError,
    PaymentRequiredError,
    enroll_in_course,
    get_enrollment,
)
from app.domain.entities import User
from app.infrastructure.database import get_db
from app.infrastructure.notifications import (
    NotificationBroadcaster,
    get_notification_broadcaster,
)
from app.interfaces.api.dependencies import get_current_user
from app.interfaces.api.schemas import EnrollmentCheck, EnrollmentCreate, EnrollmentRead

router = APIRouter(prefix="/enrollments", tags=["enrollments"])


@router.post(
    "/",
    response_model=EnrollmentRead,
    status_code=status.HTTP_201_CREATED,
    responses={200: {"description": "The caller was already enrolled"}},
)
def enroll(
    payload: EnrollmentCreate,
    response: Response,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
    broadcaster: NotificationBroadcaster = Depends(get_notification_broadcaster),
) -> EnrollmentRead:
    """Enroll the caller in a free course; repeated calls return the same row."""

    try:
        result = enroll_in_course(
            db,
            user_id=current_user.id,
            course_id=payload.course_id,
            broadcaster=broadcaster,
        )
    except CourseNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    except PaymentRequiredError as exc:
        raise HTTPException(
            status_code=status.HTTP_402_PAYMENT_REQUIRED, detail=str(exc)
        ) from exc

    if not result.created:
        response.status_code = status.HTTP_200_OK
    return EnrollmentRead.model_validate(result.enrollment)


@router.get("/check", response_model=EnrollmentCheck)
def check_enrollment(
    course_id: str = Query(..., min_length=1),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> EnrollmentCheck:
    """Report whether the caller is enrolled in ``course_id``."""

    enrollment = get_enrollment(db, user_id=current_user.id, course_id=course_id)
    return EnrollmentCheck(
        enrolled=enrollment is not None,
        enrollment_id=enrollment.id if enrollment else None,
    )
