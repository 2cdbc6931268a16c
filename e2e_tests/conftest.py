"""
Pytest configuration and fixtures for E2E tests.

Provides reusable fixtures for authentication, test data, and page objects.
"""
import pytest
from django.contrib.auth import get_user_model
from playwright.sync_api import Page, Browser, BrowserContext

User = get_user_model()


# ============================================================================
# Django Database Setup
# ============================================================================

@pytest.fixture(scope="session")
def django_db_setup(django_db_setup, django_db_blocker):
    """
    Set up test database with required data before E2E tests.

    Creates a teacher who belongs to one organization and a second teacher
    who belongs to none.
    """
    with django_db_blocker.unblock():
        from apps.organizations.models import Organization

        teacher_user = User.objects.create_user(
            username='test_teacher',
            email='teacher@example.com',
            password='TestPass123!',
            first_name='John',
            last_name='Teacher'
        )
        # Profile is auto-created by signal, just fill in the GitHub identity
        teacher_user.profile.github_login = 'john-teacher'
        teacher_user.profile.save()

        organization = Organization.objects.create(title='E2E Classroom', slug='e2e-classroom')
        organization.users.add(teacher_user)

        User.objects.create_user(
            username='test_teacher2',
            email='teacher2@example.com',
            password='TestPass123!',
            first_name='Sarah',
            last_name='Instructor'
        )


# ============================================================================
# Browser & Context Fixtures
# ============================================================================

@pytest.fixture(scope="function")
def context(browser: Browser) -> BrowserContext:
    """Create a new browser context for each test (isolated cookies/storage)."""
    context = browser.new_context(
        viewport={'width': 1280, 'height': 720},
    )
    yield context
    context.close()


@pytest.fixture(scope="function")
def page(context: BrowserContext) -> Page:
    """Create a new page for each test."""
    page = context.new_page()
    yield page
    page.close()


# ============================================================================
# Authentication Fixtures
# ============================================================================

@pytest.fixture
def login_page(page: Page, live_server):
    """Navigate to login page."""
    from e2e_tests.pages.login_page import LoginPage
    page.goto(f"{live_server.url}/accounts/login/")
    return LoginPage(page)


@pytest.fixture
def authenticated_teacher_page(page: Page, live_server):
    """
    Returns a page authenticated as the organization's teacher.

    Example:
        def test_organization_page(authenticated_teacher_page, live_server):
            page = authenticated_teacher_page
            page.goto(f"{live_server.url}/organizations/e2e-classroom/")
    """
    from e2e_tests.pages.login_page import LoginPage

    page.goto(f"{live_server.url}/accounts/login/")
    login_page = LoginPage(page)
    login_page.login('test_teacher', 'TestPass123!')

    # Wait for redirect after successful login
    page.wait_for_url('**/organizations/**', timeout=5000)

    return page


# ============================================================================
# Page Object Fixtures
# ============================================================================

@pytest.fixture
def new_assignment_page(authenticated_teacher_page: Page, live_server):
    """Returns the new assignment form of the teacher's organization."""
    from e2e_tests.pages.assignment_form_page import AssignmentFormPage
    authenticated_teacher_page.goto(f"{live_server.url}/organizations/e2e-classroom/assignments/new/")
    return AssignmentFormPage(authenticated_teacher_page)
