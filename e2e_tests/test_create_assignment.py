"""
E2E tests for creating assignments.

Covers the teacher journey from the organization page to a new assignment.
"""
import pytest
from datetime import datetime, timedelta
from playwright.sync_api import expect

pytestmark = pytest.mark.e2e


@pytest.mark.django_db
class TestCreateAssignment:
    """Test suite for the new assignment form."""

    def test_teacher_can_create_assignment(self, new_assignment_page, live_server):
        """
        User journey:
        1. Teacher opens the new assignment form
        2. Teacher submits a title only
        3. Teacher lands on the assignment page with a success message
        """
        # Act
        new_assignment_page.create_assignment(title='Linked Lists')

        # Assert
        new_assignment_page.expect_success('"Linked Lists" has been created!')
        expect(new_assignment_page.page).to_have_url(
            f"{live_server.url}/organizations/e2e-classroom/assignments/linked-lists/"
        )

    def test_teacher_can_create_assignment_with_deadline(self, new_assignment_page):
        """Test that a future deadline is accepted and shown."""
        deadline = (datetime.now() + timedelta(days=14)).strftime('%m/%d/%Y 17:00')

        new_assignment_page.create_assignment(title='Hash Maps', deadline=deadline)

        new_assignment_page.expect_success()
        expect(new_assignment_page.page.locator('text=Due')).to_be_visible()

    def test_invalid_deadline_shows_error(self, new_assignment_page):
        """Test that an unparseable deadline keeps the teacher on the form."""
        new_assignment_page.create_assignment(title='Graphs', deadline='whenever')

        new_assignment_page.expect_error('is not a valid date')
        assert new_assignment_page.page.url.endswith('/assignments/new/')

    def test_new_assignment_listed_on_organization_page(self, new_assignment_page, live_server):
        """Test that the organization page links to the new assignment."""
        new_assignment_page.create_assignment(title='Trees')
        new_assignment_page.expect_success()

        page = new_assignment_page.page
        page.goto(f"{live_server.url}/organizations/e2e-classroom/")
        expect(page.locator('#assignments')).to_contain_text('Trees')
