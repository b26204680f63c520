from rest_framework import serializers

from ..models import Chat, ExpenseGroup, Listing, Message, RoomPhoto, Settlement, User, UserMatch


def absolute_media_url(file_field, context):
    if not file_field:
        return None
    request = context.get('request')
    url = file_field.url
    if request is None:
        return url
    return request.build_absolute_uri(url)


class UserSummarySerializer(serializers.ModelSerializer):
    """Compact user card embedded in matches, chats and listings."""

    profilePicture = serializers.SerializerMethodField()
    userType = serializers.CharField(source='user_type', read_only=True)

    class Meta:
        model = User
        fields = ('id', 'name', 'age', 'bio', 'location', 'profilePicture', 'userType')
        read_only_fields = fields

    def get_profilePicture(self, obj):
        return absolute_media_url(obj.profile_picture, self.context)


class UserSerializer(serializers.ModelSerializer):
    """Serializer exposing the current user's profile with camelCase field names."""

    profilePicture = serializers.SerializerMethodField()
    userType = serializers.CharField(source='user_type', read_only=True)
    housingStatus = serializers.CharField(source='housing_status', read_only=True)
    profileVisible = serializers.BooleanField(source='profile_visible', read_only=True)
    isVerified = serializers.BooleanField(source='is_verified', read_only=True)
    universityAffiliation = serializers.CharField(source='university_affiliation', read_only=True)
    professionalStatus = serializers.CharField(source='professional_status', read_only=True)
    createdAt = serializers.DateTimeField(source='created_at', read_only=True)
    updatedAt = serializers.DateTimeField(source='updated_at', read_only=True)

    class Meta:
        model = User
        fields = (
            'id',
            'email',
            'name',
            'age',
            'gender',
            'profession',
            'bio',
            'location',
            'area',
            'budget',
            'profilePicture',
            'userType',
            'housingStatus',
            'profileVisible',
            'isVerified',
            'universityAffiliation',
            'professionalStatus',
            'preferences',
            'lifestyle',
            'hobbies',
            'createdAt',
            'updatedAt',
        )
        read_only_fields = fields

    def get_profilePicture(self, obj):
        return absolute_media_url(obj.profile_picture, self.context)


class RoomPhotoSerializer(serializers.ModelSerializer):
    photo_url = serializers.SerializerMethodField()

    class Meta:
        model = RoomPhoto
        fields = ('id', 'user_id', 'photo_url', 'caption', 'is_primary', 'display_order', 'uploaded_at')
        read_only_fields = fields

    def get_photo_url(self, obj):
        return absolute_media_url(obj.image, self.context)


class FullProfileSerializer(UserSerializer):
    room_photos = RoomPhotoSerializer(many=True, read_only=True)

    class Meta(UserSerializer.Meta):
        fields = UserSerializer.Meta.fields + ('room_photos',)
        read_only_fields = fields


class DiscoveredProfileSerializer(serializers.Serializer):
    """Serializes ``DiscoveredProfile`` value objects from the match service."""

    def to_representation(self, instance):
        data = FullProfileSerializer(instance.user, context=self.context).data
        data['is_mutual_match'] = instance.is_mutual_match
        data['distance'] = instance.distance
        return data


class MatchSerializer(serializers.ModelSerializer):
    matched_user = UserSummarySerializer(source='target_user', read_only=True)

    class Meta:
        model = UserMatch
        fields = ('id', 'user_id', 'target_user_id', 'match_type', 'created_at', 'matched_user')
        read_only_fields = fields


class MutualMatchSerializer(serializers.Serializer):
    user = UserSummarySerializer(read_only=True)
    liked_at = serializers.DateTimeField(read_only=True)
    liked_back_at = serializers.DateTimeField(read_only=True)
    matched_at = serializers.DateTimeField(read_only=True)


class ChatSerializer(serializers.ModelSerializer):
    other_user = serializers.SerializerMethodField()
    unread_count = serializers.SerializerMethodField()

    class Meta:
        model = Chat
        fields = (
            'id',
            'user1_id',
            'user2_id',
            'last_message',
            'last_message_at',
            'created_at',
            'updated_at',
            'other_user',
            'unread_count',
        )
        read_only_fields = fields

    def get_other_user(self, obj):
        other = getattr(obj, 'other_user', None)
        if other is None:
            request = self.context.get('request')
            if request is None:
                return None
            other = obj.other_participant(request.user)
        return {
            'id': other.pk,
            'name': other.display_name,
            'avatar': absolute_media_url(other.profile_picture, self.context),
        }

    def get_unread_count(self, obj):
        return getattr(obj, 'unread_count', 0)


class MessageSerializer(serializers.ModelSerializer):
    image_url = serializers.SerializerMethodField()
    sender_name = serializers.CharField(source='sender.display_name', read_only=True)
    sender_avatar = serializers.SerializerMethodField()

    class Meta:
        model = Message
        fields = (
            'id',
            'chat_id',
            'sender_id',
            'content',
            'message_type',
            'image_url',
            'is_read',
            'is_delivered',
            'created_at',
            'sender_name',
            'sender_avatar',
        )
        read_only_fields = fields

    def get_image_url(self, obj):
        return absolute_media_url(obj.image, self.context)

    def get_sender_avatar(self, obj):
        return absolute_media_url(obj.sender.profile_picture, self.context)


class ListingSerializer(serializers.ModelSerializer):
    images = serializers.SerializerMethodField()
    seller = UserSummarySerializer(source='created_by', read_only=True)

    class Meta:
        model = Listing
        fields = (
            'id',
            'title',
            'description',
            'price',
            'location',
            'images',
            'status',
            'created_by',
            'seller',
            'created_at',
            'updated_at',
        )
        read_only_fields = fields

    def get_images(self, obj):
        return [absolute_media_url(listing_image.image, self.context) for listing_image in obj.images.all()]


class ParticipantShareSerializer(serializers.Serializer):
    user_id = serializers.IntegerField()
    name = serializers.CharField()
    amount_owed = serializers.DecimalField(max_digits=10, decimal_places=2)
    amount_paid = serializers.DecimalField(max_digits=10, decimal_places=2)
    is_settled = serializers.BooleanField()
    is_creator = serializers.BooleanField()


class ExpenseSummarySerializer(serializers.Serializer):
    group_id = serializers.IntegerField(source='group.id')
    group_name = serializers.CharField(source='group.name')
    description = serializers.CharField(source='group.description')
    total_amount = serializers.DecimalField(source='group.total_amount', max_digits=10, decimal_places=2)
    split_type = serializers.CharField(source='group.split_type')
    status = serializers.CharField(source='group.status')
    created_at = serializers.DateTimeField(source='group.created_at')
    created_by_id = serializers.IntegerField(source='group.created_by_id')
    created_by_name = serializers.CharField()
    amount_owed = serializers.DecimalField(max_digits=10, decimal_places=2)
    amount_paid = serializers.DecimalField(max_digits=10, decimal_places=2)
    is_settled = serializers.BooleanField()
    participants = ParticipantShareSerializer(many=True)


class ExpenseGroupSerializer(serializers.ModelSerializer):
    class Meta:
        model = ExpenseGroup
        fields = ('id', 'name', 'description', 'total_amount', 'split_type', 'created_by', 'status', 'created_at')
        read_only_fields = fields


class SettlementSerializer(serializers.ModelSerializer):
    group_name = serializers.CharField(source='group.name', read_only=True)
    payer_name = serializers.CharField(source='payer.display_name', read_only=True)
    proof_image = serializers.SerializerMethodField()

    class Meta:
        model = Settlement
        fields = (
            'id',
            'group_id',
            'group_name',
            'payer_id',
            'payer_name',
            'receiver_id',
            'amount',
            'payment_method',
            'proof_image',
            'notes',
            'status',
            'created_at',
            'approved_at',
        )
        read_only_fields = fields

    def get_proof_image(self, obj):
        return absolute_media_url(obj.proof_image, self.context)


class ExpenseDashboardSerializer(serializers.Serializer):
    active_expenses = ExpenseSummarySerializer(many=True)
    pending_settlements = SettlementSerializer(many=True)
    total_owed = serializers.DecimalField(max_digits=12, decimal_places=2)
    total_to_receive = serializers.DecimalField(max_digits=12, decimal_places=2)
