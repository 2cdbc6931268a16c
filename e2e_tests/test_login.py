"""
E2E tests for login functionality.
"""
import pytest

pytestmark = pytest.mark.e2e


@pytest.mark.django_db
class TestLogin:
    """Test suite for login functionality."""

    def test_teacher_can_login_successfully(self, login_page, live_server):
        """Test that a teacher can log in with valid credentials."""
        # Act
        login_page.login('test_teacher', 'TestPass123!')

        # Assert
        login_page.expect_login_success('test_teacher')
        assert login_page.is_logged_in()

    def test_login_fails_with_wrong_password(self, login_page, live_server):
        """Test that login fails with incorrect password."""
        # Act
        login_page.login('test_teacher', 'WrongPassword123')

        # Assert - should still be on login page with error
        login_page.expect_login_error()
        assert '/login' in login_page.page.url

    def test_login_fails_with_nonexistent_user(self, login_page, live_server):
        """Test that login fails with non-existent username."""
        # Act
        login_page.login('nonexistent_user', 'TestPass123!')

        # Assert
        login_page.expect_login_error()

    def test_teacher_redirected_to_organizations_after_login(self, login_page, live_server):
        """Test that the teacher lands on their organization list."""
        # Act
        login_page.login('test_teacher', 'TestPass123!')

        # Assert - should be redirected away from login page
        login_page.page.wait_for_url('**/organizations/**', timeout=5000)
        assert '/login' not in login_page.page.url

    def test_teacher_without_organizations_sees_empty_list(self, login_page, live_server):
        """Test that a teacher without organizations can still log in."""
        login_page.login('test_teacher2', 'TestPass123!')

        login_page.page.wait_for_url('**/organizations/**', timeout=5000)
        assert login_page.is_logged_in()

    def test_teacher_can_log_out(self, login_page, live_server):
        """Test that logging out sends protected pages back to the login form."""
        login_page.login('test_teacher', 'TestPass123!')
        login_page.expect_login_success()

        login_page.logout()
        login_page.page.goto(f"{live_server.url}/organizations/")
        assert '/accounts/login' in login_page.page.url
