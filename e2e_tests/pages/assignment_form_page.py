"""
Page Object Model for the new/edit assignment form.
"""
from playwright.sync_api import Page, expect


class AssignmentFormPage:
    """Page object for the assignment form."""

    def __init__(self, page: Page):
        self.page = page

        # Locators
        self.title_input = page.locator('input[name="title"]')
        self.slug_input = page.locator('input[name="slug"]')
        self.deadline_input = page.locator('input[name="deadline"]')
        self.public_repo_checkbox = page.locator('input[name="public_repo"]')
        self.submit_button = page.locator('form button[type="submit"]').first
        self.success_message = page.locator('.alert-success')
        self.error_messages = page.locator('.alert-error, .text-error')

    def create_assignment(self, title: str, slug: str = '', deadline: str = '', public_repo: bool = True):
        """
        Fill in and submit the form.

        Args:
            title: Assignment title
            slug: Repository prefix, generated from the title when blank
            deadline: Deadline as MM/DD/YYYY HH:MM, or blank for none
            public_repo: Whether student repositories are public
        """
        self.title_input.fill(title)
        self.slug_input.fill(slug)
        self.deadline_input.fill(deadline)
        self.public_repo_checkbox.set_checked(public_repo)
        self.submit_button.click()

    def expect_success(self, message_text: str = None):
        """Assert the success flash is shown."""
        expect(self.success_message).to_be_visible(timeout=5000)
        if message_text:
            expect(self.success_message).to_contain_text(message_text)

    def expect_error(self, error_text: str = None):
        """Assert the form was re-rendered with an error."""
        expect(self.error_messages.first).to_be_visible(timeout=3000)
        if error_text:
            expect(self.error_messages.first).to_contain_text(error_text)
