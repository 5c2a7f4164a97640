from rest_framework import serializers
from uploads.serializers import FileSerializer
from .models import Veteran, NextOfKin, Status

class VeteranSerializer(serializers.ModelSerializer):
    class Meta:
        model = Veteran
        fields = ['id', 'first_name', 'last_name', 'birth_date', 'death_date', 'biography', 'created_at', 'updated_at']
        read_only_fields = ['id', 'created_at', 'updated_at']

    def validate(self, data):
        birth_date = data.get('birth_date', getattr(self.instance, 'birth_date', None))
        death_date = data.get('death_date', getattr(self.instance, 'death_date', None))
        if birth_date and death_date and death_date < birth_date:
            raise serializers.ValidationError({'death_date': "Date of death cannot precede date of birth."})
        return data

class NextOfKinSerializer(serializers.ModelSerializer):
    proofs = FileSerializer(many=True, read_only=True)
    username = serializers.CharField(source='user.username', read_only=True)

    class Meta:
        model = NextOfKin
        fields = [
            'id', 'user', 'username', 'veteran', 'full_name', 'email', 'status', 'response',
            'proofs', 'created_by', 'updated_by', 'created_at', 'updated_at'
        ]
        read_only_fields = fields

class NextOfKinCreateSerializer(serializers.Serializer):
    veteran = serializers.PrimaryKeyRelatedField(queryset=Veteran.objects.all())
    full_name = serializers.CharField(max_length=200)
    email = serializers.EmailField()

class NextOfKinRejectSerializer(serializers.Serializer):
    response = serializers.CharField()

class NextOfKinSearchSerializer(serializers.Serializer):
    veteran_id = serializers.IntegerField(required=False, min_value=1)
    user_id = serializers.IntegerField(required=False, min_value=1)
    status = serializers.ChoiceField(choices=Status.choices, required=False)
