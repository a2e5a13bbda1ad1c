# backend/modules/feedback/__init__.py

"""
Customer Reviews and Feedback Module

Key Components:
- Models: Review and Feedback
- Services: review lifecycle, business rating aggregation, feedback
  handling, owner notifications
- Routers: public review/feedback endpoints and the /admin listings

A rating of 3 or below shows the customer a private feedback form; 4 and
5 send them on to the business's Google review page.
"""

__version__ = "1.0.0"
