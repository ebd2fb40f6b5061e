"""API tests for the guide application workflow."""

from __future__ import annotations

from django.urls import reverse
from rest_framework import status
from rest_framework.test import APITestCase

from apps.users.models import CustomUser, GuideProfile, User


def guide_payload(**overrides):
    payload = {
        "firstName": "Aida",
        "lastName": "Nurlan",
        "bio": "Mountain guide with ten years of experience.",
        "expertise": "Hiking",
        "activityField": "Outdoor",
        "city": "Almaty",
        "activityArea": "Trans-Ili Alatau",
        "email": "aida@guides.example.com",
        "phone": "+77011234567",
        "socialMedia": {"instagram": "@aida.hikes"},
    }
    payload.update(overrides)
    return payload


class GuideWorkflowAPITests(APITestCase):
    def setUp(self) -> None:
        self.user = User.objects.create_user(email="aida@example.com", password="secret1", name="Aida")
        self.client.force_authenticate(self.user)

    def test_apply_creates_unapproved_profile(self) -> None:
        response = self.client.post(reverse("guides:apply"), guide_payload(), format="json")

        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertFalse(response.data["guideProfile"]["isApproved"])
        self.assertEqual(response.data["guideProfile"]["socialMedia"]["instagram"], "@aida.hikes")
        self.user.refresh_from_db()
        self.assertTrue(self.user.is_guide)
        self.assertEqual(self.user.kind, CustomUser.Kind.GUIDE)
        self.assertFalse(self.user.is_approved_guide())

    def test_apply_requires_profile_fields(self) -> None:
        payload = guide_payload()
        del payload["city"]

        response = self.client.post(reverse("guides:apply"), payload, format="json")

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST, response.data)
        self.assertIn("city", response.data["errors"])
        self.assertFalse(GuideProfile.objects.exists())

    def test_approved_guide_cannot_reapply(self) -> None:
        self.client.post(reverse("guides:apply"), guide_payload(), format="json")
        GuideProfile.objects.get(user=self.user).approve()

        response = self.client.post(reverse("guides:apply"), guide_payload(city="Astana"), format="json")

        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT, response.data)
        self.assertEqual(GuideProfile.objects.get(user=self.user).city, "Almaty")

    def test_profile_requires_guide(self) -> None:
        response = self.client.get(reverse("guides:profile"))

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN, response.data)
        self.assertEqual(response.data["message"], "You are not registered as an experience guide.")
        self.assertEqual(self.user.kind, CustomUser.Kind.PLAIN)

    def test_profile_update_ignores_approval_flag(self) -> None:
        self.client.post(reverse("guides:apply"), guide_payload(), format="json")

        response = self.client.put(
            reverse("guides:profile"),
            {"bio": "Updated bio", "isApproved": True},
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        profile = GuideProfile.objects.get(user=self.user)
        self.assertEqual(profile.bio, "Updated bio")
        self.assertFalse(profile.is_approved)

    def test_public_profile_only_for_approved_guides(self) -> None:
        self.client.post(reverse("guides:apply"), guide_payload(), format="json")
        url = reverse("guides:public-profile", kwargs={"guide_id": self.user.id})
        self.client.force_authenticate(None)

        pending = self.client.get(url)
        self.assertEqual(pending.status_code, status.HTTP_404_NOT_FOUND, pending.data)

        GuideProfile.objects.get(user=self.user).approve()
        approved = self.client.get(url)
        self.assertEqual(approved.status_code, status.HTTP_200_OK, approved.data)
        self.assertEqual(approved.data["city"], "Almaty")
        self.assertNotIn("email", approved.data)
        self.assertNotIn("phone", approved.data)

    def test_public_profile_for_unknown_user(self) -> None:
        response = self.client.get(reverse("guides:public-profile", kwargs={"guide_id": 999}))

        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND, response.data)
        self.assertEqual(response.data, {"message": "Guide not found."})
