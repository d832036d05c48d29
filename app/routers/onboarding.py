from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.database import get_db
from app.models.user import User
from app.schemas.graduation import GraduationRequirementOut
from app.schemas.onboarding import OnboardingIn, OnboardingOut
from app.schemas.user import UserOut
from app.services.onboarding import complete_onboarding
from app.utils.auth import get_current_user

router = APIRouter(prefix="/onboarding", tags=["Onboarding"])


@router.post("/complete", response_model=OnboardingOut)
def complete(body: OnboardingIn, db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    user, req = complete_onboarding(db, user, body)
    return OnboardingOut(
        user=UserOut.model_validate(user),
        graduation_requirement=GraduationRequirementOut.model_validate(req),
    )
