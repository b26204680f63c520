from django import forms

from ..models import User
from .fields import StringListField

HABIT_CHOICES = (
    ("yes", "Yes"),
    ("no", "No"),
    ("occasionally", "Occasionally"),
)
PET_CHOICES = (
    ("yes", "Yes"),
    ("no", "No"),
    ("negotiable", "Negotiable"),
)
ROOM_TYPE_CHOICES = (
    ("private", "Private Room"),
    ("shared", "Shared Room"),
    ("studio", "Studio"),
    ("apartment", "Entire Apartment"),
)
LEASE_DURATION_CHOICES = (
    ("6_months", "6 Months"),
    ("1_year", "1 Year"),
    ("month_to_month", "Month to Month"),
    ("flexible", "Flexible"),
)


class ProfileUpdateForm(forms.ModelForm):
    """Partial edits to the profile fields a user can change from the settings screen."""

    class Meta:
        model = User
        fields = [
            "name",
            "age",
            "gender",
            "profession",
            "bio",
            "location",
            "area",
            "budget",
            "housing_status",
            "university_affiliation",
            "professional_status",
            "profile_picture",
        ]

    def clean_age(self):
        age = self.cleaned_data.get("age")
        if age is not None and not 18 <= age <= 100:
            raise forms.ValidationError("Age must be between 18 and 100")
        return age


class RoleForm(forms.Form):
    role = forms.ChoiceField(choices=User.USER_TYPE_CHOICES)


class VisibilityForm(forms.Form):
    profile_visible = forms.NullBooleanField()

    def clean_profile_visible(self):
        visible = self.cleaned_data.get("profile_visible")
        if visible is None:
            raise forms.ValidationError("profile_visible must be provided as a boolean")
        return visible


class ProfileSetupForm(forms.Form):
    name = forms.CharField(max_length=150, error_messages={"required": "Name is required"})
    age = forms.IntegerField(
        min_value=18,
        max_value=100,
        error_messages={
            "required": "Age must be between 18 and 100",
            "min_value": "Age must be between 18 and 100",
            "max_value": "Age must be between 18 and 100",
        },
    )
    gender = forms.ChoiceField(choices=[("", "")] + list(User.GENDER_CHOICES), required=False)
    profession = forms.CharField(max_length=100, required=False)
    bio = forms.CharField(widget=forms.Textarea, error_messages={"required": "Bio is required"})
    hobbies = StringListField()
    smoking = forms.ChoiceField(choices=HABIT_CHOICES, required=False)
    drinking = forms.ChoiceField(choices=HABIT_CHOICES, required=False)
    pets = forms.ChoiceField(choices=PET_CHOICES, required=False)
    budget_min = forms.IntegerField(min_value=0, required=False)
    budget_max = forms.IntegerField(min_value=0, required=False)
    location = forms.CharField(max_length=255, error_messages={"required": "Location is required"})

    def clean(self):
        cleaned_data = super().clean()
        budget_min = cleaned_data.get("budget_min")
        budget_max = cleaned_data.get("budget_max")
        if budget_min is not None and budget_max is not None and budget_min > budget_max:
            self.add_error("budget_max", "Maximum budget cannot be lower than the minimum budget.")
        return cleaned_data


class RoomDetailsForm(forms.Form):
    room_type = forms.ChoiceField(choices=ROOM_TYPE_CHOICES)
    rent_amount = forms.IntegerField(
        min_value=1,
        error_messages={
            "required": "Rent amount must be greater than 0",
            "min_value": "Rent amount must be greater than 0",
        },
    )
    deposit_amount = forms.IntegerField(min_value=0, required=False)
    available_from = forms.DateField(required=False)
    lease_duration = forms.ChoiceField(choices=[("", "")] + list(LEASE_DURATION_CHOICES), required=False)
    furnished = forms.BooleanField(required=False)
    utilities_included = forms.BooleanField(required=False)
    amenities = StringListField()
    house_rules = StringListField()
    description = forms.CharField(widget=forms.Textarea, required=False)
    address = forms.CharField(max_length=255, error_messages={"required": "Address is required"})
    neighborhood = forms.CharField(max_length=100, required=False)


class SeekerPreferencesForm(forms.Form):
    preferred_gender = forms.CharField(max_length=20, required=False)
    age_range_min = forms.IntegerField(min_value=18, max_value=100, required=False)
    age_range_max = forms.IntegerField(min_value=18, max_value=100, required=False)
    preferred_location = forms.CharField(max_length=255, required=False)
    max_budget = forms.IntegerField(
        min_value=1,
        error_messages={
            "required": "Budget must be greater than 0",
            "min_value": "Budget must be greater than 0",
        },
    )
    preferred_room_type = forms.ChoiceField(choices=[("", "")] + list(ROOM_TYPE_CHOICES), required=False)
    deal_breakers = StringListField()

    def clean(self):
        cleaned_data = super().clean()
        age_min = cleaned_data.get("age_range_min")
        age_max = cleaned_data.get("age_range_max")
        if age_min is not None and age_max is not None and age_min > age_max:
            self.add_error("age_range_max", "Maximum age cannot be lower than the minimum age.")
        return cleaned_data
