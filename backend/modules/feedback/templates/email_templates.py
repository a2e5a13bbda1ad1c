# backend/modules/feedback/templates/email_templates.py

"""
Email templates for review notifications.

Bodies are Jinja2 templates. Each notification is sent as a
multipart/alternative message with a plain-text and an HTML part.
"""

import re
from typing import Any, Dict, Tuple

from jinja2 import Template

# Base HTML template
BASE_TEMPLATE = """
<!DOCTYPE html>
<html>
<head>
    <meta charset="UTF-8">
    <title>{{ subject }}</title>
    <style>
        body { font-family: 'Segoe UI', Tahoma, sans-serif; line-height: 1.6; color: #333; max-width: 600px; margin: 0 auto; padding: 20px; }
        .header { background: #1f4e79; color: white; padding: 20px; text-align: center; border-radius: 8px 8px 0 0; }
        .content { background: white; padding: 30px; border: 1px solid #e1e5e9; border-top: none; }
        .footer { background: #f8f9fa; padding: 20px; text-align: center; border: 1px solid #e1e5e9; border-top: none; border-radius: 0 0 8px 8px; font-size: 14px; color: #6c757d; }
        .rating { color: #ffc107; font-size: 18px; }
        .highlight { background: #fff3cd; padding: 15px; border-left: 4px solid #ffc107; margin: 20px 0; }
    </style>
</head>
<body>
    <div class="header">
        <h1>{{ app_name }}</h1>
    </div>
    <div class="content">
        {{ content }}
    </div>
    <div class="footer">
        <p>This email was sent by {{ app_name }}</p>
    </div>
</body>
</html>
"""

REVIEW_NOTIFICATION_SUBJECT = "New {{ rating }}-Star Review for {{ business_name }}"

REVIEW_NOTIFICATION_TEXT = """Hello {{ owner_name }},

You have received a new review for your business: {{ business_name }}

RATING: {{ rating }}/5 stars

Customer: {{ customer_name }}{% if customer_email %} ({{ customer_email }}){% endif %}
Date: {{ created_at }}
{% if comment %}
REVIEW COMMENT:
"{{ comment }}"
{% endif %}
{% if rating <= 2 %}This is a concerning low rating. {% elif rating == 3 %}This is an average rating that could be improved. {% endif %}
{%- if feedback_form_shown %}The customer was shown a feedback form to provide more details about their experience. You can check if they provided additional feedback in your admin panel.{% else %}The customer was invited to share their review on Google.{% endif %}
{% if feedback_form_shown %}
NEXT STEPS:
- Review this feedback carefully
- Identify areas for improvement
- Consider reaching out to address any concerns
{% if customer_email %}- Customer contact: {{ customer_email }}
{% endif %}{% endif %}
View all reviews: {{ admin_url }}
Your business page: {{ business_url }}

Best regards,
{{ app_name }} Team
"""

REVIEW_NOTIFICATION_HTML = """
<h2>New review for {{ business_name }}</h2>

<p>Hello {{ owner_name }},</p>

<div class="highlight">
    <p><strong>Rating:</strong> <span class="rating">{{ rating_stars }}</span> ({{ rating }}/5)</p>
    <p><strong>Customer:</strong> {{ customer_name }}{% if customer_email %} ({{ customer_email }}){% endif %}</p>
    <p><strong>Date:</strong> {{ created_at }}</p>
    {% if comment %}<p><strong>Comment:</strong> {{ comment }}</p>{% endif %}
</div>

{% if rating <= 2 %}<p>This is a concerning low rating.</p>{% elif rating == 3 %}<p>This is an average rating that could be improved.</p>{% endif %}
{% if feedback_form_shown %}
<p>The customer was shown a feedback form. Check your admin panel for any additional feedback.</p>
{% else %}
<p>The customer was invited to share their review on Google.</p>
{% endif %}

<p><a href="{{ admin_url }}">View all reviews</a> | <a href="{{ business_url }}">Your business page</a></p>
"""

TEST_EMAIL_SUBJECT = "Test Email from {{ app_name }}"

TEST_EMAIL_TEXT = """This is a test email to verify email configuration is working correctly.

If you receive this, email notifications are set up properly!
"""


def render_review_notification(variables: Dict[str, Any]) -> Tuple[str, str, str]:
    """Render subject, text body and HTML body for a new-review email"""
    variables = {**variables, "rating_stars": get_rating_stars(variables["rating"])}

    subject = Template(REVIEW_NOTIFICATION_SUBJECT).render(**variables)
    text_body = Template(REVIEW_NOTIFICATION_TEXT).render(**variables)
    content = Template(REVIEW_NOTIFICATION_HTML, autoescape=True).render(**variables)
    html_body = Template(BASE_TEMPLATE).render(
        subject=subject, app_name=variables["app_name"], content=content
    )
    return subject, text_body, html_body


def render_test_email(app_name: str) -> Tuple[str, str]:
    return (
        Template(TEST_EMAIL_SUBJECT).render(app_name=app_name),
        Template(TEST_EMAIL_TEXT).render(app_name=app_name),
    )


def get_rating_stars(rating: int) -> str:
    """Convert a 1-5 rating to star characters"""
    return "★" * rating + "☆" * (5 - rating)


def business_slug(business_name: str) -> str:
    """URL-friendly form of a business name, as used by the frontend routes"""
    if not business_name or not business_name.strip():
        return ""
    slug = business_name.lower()
    slug = re.sub(r"[^a-z0-9\s-]", "", slug)
    slug = re.sub(r"\s+", "-", slug)
    slug = re.sub(r"-+", "-", slug)
    return slug.strip("-")
