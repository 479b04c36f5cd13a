from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from quizme.core.database import get_db
from quizme.core.security import get_current_user_id, get_optional_user_id
from quizme.models.result_db.result_crud import get_result_by_slug, ensure_result_access, detailed_answers, \
    get_my_results, get_results_for_quiz, toggle_result_visibility
from quizme.schemas.common.page_response import PageResponse
from quizme.schemas.result.result_base import ResultListItem, ResultOut, ResultDetailOut, ResultVisibilityOut

result_router = APIRouter(prefix="/results", tags=["Results"])


@result_router.get("/my-results", response_model=PageResponse[ResultListItem])
def my_results(
    page: int = Query(1, ge=1),
    size: int = Query(10, ge=1, le=100),
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    skip = (page - 1) * size
    total, results = get_my_results(db, user_id, skip=skip, limit=size)

    return PageResponse[ResultListItem](
        page=page,
        size=size,
        total=total,
        has_next=(page * size) < total,
        has_prev=page > 1,
        items=[ResultListItem.model_validate(result) for result in results],
    )


@result_router.get("/quiz/{quiz_slug}", response_model=List[ResultOut])
def results_for_quiz(quiz_slug: str, db: Session = Depends(get_db), user_id: str = Depends(get_current_user_id)):
    return get_results_for_quiz(db, quiz_slug, user_id)


@result_router.get("/{slug}", response_model=ResultDetailOut)
def get_result(slug: str, db: Session = Depends(get_db), user_id: Optional[str] = Depends(get_optional_user_id)):
    result = get_result_by_slug(db, slug)
    ensure_result_access(result, user_id)
    summary = ResultListItem.model_validate(result)
    return ResultDetailOut(**summary.model_dump(), answers=detailed_answers(result))


@result_router.patch("/{slug}/visibility", response_model=ResultVisibilityOut)
def toggle_visibility(slug: str, db: Session = Depends(get_db), user_id: str = Depends(get_current_user_id)):
    return toggle_result_visibility(db, slug, user_id)
