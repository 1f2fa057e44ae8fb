from locust import HttpUser, task, between
import os
import random


class AnalyticsUser(HttpUser):
    """Locust user reading cached metrics with HTTP basic auth."""

    wait_time = between(0.5, 2.5)

    def on_start(self):
        self.client.auth = (
            os.getenv("LOCUST_USERNAME", "analyst"),
            os.getenv("LOCUST_PASSWORD", "testpass123"),
        )
        self.advertiser_ids = [int(pk) for pk in os.getenv("LOCUST_ADVERTISER_IDS", "1").split(",")]
        self.campaign_ids = [int(pk) for pk in os.getenv("LOCUST_CAMPAIGN_IDS", "1").split(",")]

    @task(3)
    def advertiser_sparklines(self):
        pk = random.choice(self.advertiser_ids)
        self.client.get(f"/api/v1/analytics/advertisers/{pk}/sparklines/",
                        name="/api/v1/analytics/advertisers/[id]/sparklines/")

    @task(2)
    def advertiser_summary(self):
        pk = random.choice(self.advertiser_ids)
        self.client.get(f"/api/v1/analytics/advertisers/{pk}/summary/",
                        name="/api/v1/analytics/advertisers/[id]/summary/")

    @task(1)
    def campaign_summary_last_week(self):
        pk = random.choice(self.campaign_ids)
        self.client.get(f"/api/v1/analytics/campaigns/{pk}/summary/",
                        params={"start": os.getenv("LOCUST_START", "2024-01-01"),
                                "end": os.getenv("LOCUST_END", "2024-01-07")},
                        name="/api/v1/analytics/campaigns/[id]/summary/")


# Headless run: `locust --headless -u 50 -r 5 -t 2m -f locustfile.py --csv out --host http://localhost:8070`
