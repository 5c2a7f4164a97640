from rest_framework import serializers
from uploads.serializers import FileSerializer
from veterans.models import Veteran, Status
from .models import Story, Photo, Testimonial

MODERATION_FIELDS = [
    "id", "veteran", "status", "response", "view_count", "salute_count", "share_count",
    "created_by", "updated_by", "created_at", "updated_at",
]

class StorySerializer(serializers.ModelSerializer):
    class Meta:
        model = Story
        fields = MODERATION_FIELDS + ["title", "text"]
        read_only_fields = fields

class PhotoSerializer(serializers.ModelSerializer):
    photo_file = FileSerializer(read_only=True)

    class Meta:
        model = Photo
        fields = MODERATION_FIELDS + ["title", "photo_file"]
        read_only_fields = fields

class TestimonialSerializer(serializers.ModelSerializer):
    class Meta:
        model = Testimonial
        fields = MODERATION_FIELDS + ["title", "text"]
        read_only_fields = fields

class ContentCreateSerializer(serializers.Serializer):
    veteran = serializers.PrimaryKeyRelatedField(queryset=Veteran.objects.all())
    status = serializers.ChoiceField(
        choices=[Status.PENDING, Status.APPROVED], required=False, default=Status.PENDING
    )

class StoryCreateSerializer(ContentCreateSerializer):
    title = serializers.CharField(max_length=255)
    text = serializers.CharField()

class PhotoCreateSerializer(ContentCreateSerializer):
    title = serializers.CharField(max_length=255)

class TestimonialCreateSerializer(ContentCreateSerializer):
    title = serializers.CharField(max_length=255, required=False, allow_blank=True)
    text = serializers.CharField()

class StoryUpdateSerializer(serializers.Serializer):
    title = serializers.CharField(max_length=255, required=False)
    text = serializers.CharField(required=False)

class PhotoUpdateSerializer(serializers.Serializer):
    title = serializers.CharField(max_length=255, required=False)

class TestimonialUpdateSerializer(serializers.Serializer):
    title = serializers.CharField(max_length=255, required=False, allow_blank=True)
    text = serializers.CharField(required=False)

class RejectSerializer(serializers.Serializer):
    response = serializers.CharField(required=False, allow_blank=True, default="")

class ContentSearchSerializer(serializers.Serializer):
    veteran_id = serializers.IntegerField(required=False, min_value=1)
    user_id = serializers.IntegerField(required=False, min_value=1)
    status = serializers.ChoiceField(choices=Status.choices, required=False)
    review = serializers.BooleanField(required=False, default=False)
    sort_column = serializers.CharField(required=False, default="id")
    sort_order = serializers.ChoiceField(choices=["asc", "desc"], required=False, default="asc")
