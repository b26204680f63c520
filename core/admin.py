from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin

from .models import (
	Chat,
	ExpenseGroup,
	ExpenseParticipant,
	Listing,
	ListingImage,
	Message,
	RoomPhoto,
	Settlement,
	User,
	UserMatch,
)


@admin.register(User)
class CustomUserAdmin(BaseUserAdmin):
	list_display = ('email', 'name', 'user_type', 'location', 'profile_visible', 'is_staff')
	list_filter = BaseUserAdmin.list_filter + ('user_type', 'gender', 'profile_visible')
	search_fields = ('email', 'name', 'username', 'location')
	fieldsets = BaseUserAdmin.fieldsets + (
		(
			'Roommate Profile',
			{
				'fields': (
					'name', 'user_type', 'age', 'gender', 'profession', 'bio', 'location', 'area',
					'budget', 'profile_picture', 'housing_status', 'profile_visible', 'is_verified',
					'university_affiliation', 'professional_status', 'preferences', 'lifestyle', 'hobbies',
				),
			},
		),
	)
	add_fieldsets = BaseUserAdmin.add_fieldsets + (
		(
			'Roommate Profile',
			{
				'classes': ('wide',),
				'fields': ('email', 'name', 'user_type'),
			},
		),
	)


@admin.register(UserMatch)
class UserMatchAdmin(admin.ModelAdmin):
	list_display = ('user', 'target_user', 'match_type', 'created_at')
	list_filter = ('match_type',)


class ListingImageInline(admin.TabularInline):
	model = ListingImage
	extra = 0


@admin.register(Listing)
class ListingAdmin(admin.ModelAdmin):
	list_display = ('title', 'created_by', 'price', 'status', 'created_at')
	list_filter = ('status',)
	search_fields = ('title', 'description', 'location', 'created_by__email')
	inlines = [ListingImageInline]


class ExpenseParticipantInline(admin.TabularInline):
	model = ExpenseParticipant
	extra = 0


@admin.register(ExpenseGroup)
class ExpenseGroupAdmin(admin.ModelAdmin):
	list_display = ('name', 'created_by', 'total_amount', 'split_type', 'status')
	list_filter = ('split_type', 'status')
	inlines = [ExpenseParticipantInline]


@admin.register(Settlement)
class SettlementAdmin(admin.ModelAdmin):
	list_display = ('group', 'payer', 'receiver', 'amount', 'status', 'created_at')
	list_filter = ('status', 'payment_method')


admin.site.register(RoomPhoto)
admin.site.register(Chat)
admin.site.register(Message)
