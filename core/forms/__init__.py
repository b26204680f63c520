from .auth import RegisterForm, SignInForm
from .chat import MessageForm
from .expenses import ExpenseGroupForm, SettlementForm
from .fields import MultipleImageField, StringListField
from .marketplace import ListingForm, ListingUpdateForm
from .photos import PhotoCaptionForm, RoomPhotoUploadForm
from .profile import (
    ProfileSetupForm,
    ProfileUpdateForm,
    RoleForm,
    RoomDetailsForm,
    SeekerPreferencesForm,
    VisibilityForm,
)

__all__ = [
    "RegisterForm",
    "SignInForm",
    "MessageForm",
    "ExpenseGroupForm",
    "SettlementForm",
    "MultipleImageField",
    "StringListField",
    "ListingForm",
    "ListingUpdateForm",
    "PhotoCaptionForm",
    "RoomPhotoUploadForm",
    "ProfileSetupForm",
    "ProfileUpdateForm",
    "RoleForm",
    "RoomDetailsForm",
    "SeekerPreferencesForm",
    "VisibilityForm",
]
