"""
Page Object Model for the account login page.
"""
import re

from playwright.sync_api import Page, expect


class LoginPage:
    """Page object for /accounts/login/ and the navbar logout button."""

    def __init__(self, page: Page):
        self.page = page

        # Locators
        self.username_input = page.locator('input[name="username"]')
        self.password_input = page.locator('input[name="password"]')
        self.login_button = page.locator('button[type="submit"]:has-text("Login")')
        self.error_message = page.locator('.alert-error')
        self.logout_button = page.locator('.navbar button:has-text("Log out")')

    def login(self, username: str, password: str):
        """Fill in the credentials and submit."""
        self.username_input.fill(username)
        self.password_input.fill(password)
        self.login_button.click()

    def logout(self):
        self.logout_button.click()

    def expect_login_success(self, username: str = None):
        """
        Assert the teacher left the login page and, optionally, that the
        navbar shows their username.
        """
        expect(self.page).not_to_have_url(re.compile(r"/accounts/login/"), timeout=5000)
        expect(self.logout_button).to_be_visible()
        if username:
            expect(self.page.locator('.navbar')).to_contain_text(username)

    def expect_login_error(self):
        """Assert the form was re-rendered with the credentials error."""
        expect(self.error_message).to_be_visible(timeout=3000)
        expect(self.error_message).to_contain_text("didn't match")

    def is_logged_in(self) -> bool:
        return '/accounts/login' not in self.page.url
