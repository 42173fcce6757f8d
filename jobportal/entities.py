from __future__ import annotations

from jobportal.models import AdminRole, Banner, Category, City, Employer, FacultyUser, Job, NewsBlog, Staff, State
from jobportal.schemas.entity import EntityConfig, FilterSpec
from jobportal.services.transforms import ImageUrl

BANNERS = EntityConfig(
    name="banners",
    label="Banner",
    plural_label="Banners",
    model=Banner,
    filters=(FilterSpec("name"),),
    transforms=(ImageUrl("image", "banners"),),
    create_required=("category_id", "name", "price"),
    create_defaults={"discount_price": 0, "qty": 0},
    keep_if_absent=("image",),
    echo_fields=("name", "price"),
    file_field="image",
)

STATES = EntityConfig(
    name="states",
    label="State",
    plural_label="States",
    model=State,
    filters=(FilterSpec("name"),),
    create_required=("name",),
    update_required=("name",),
    keep_if_absent=("status",),
    echo_fields=("name", "status"),
)

CITIES = EntityConfig(
    name="cities",
    label="City",
    plural_label="Cities",
    model=City,
    filters=(FilterSpec("name"), FilterSpec("state_id", op="=", kind="int")),
    create_required=("name", "state_id"),
    update_required=("name", "state_id"),
    keep_if_absent=("status",),
    echo_fields=("name", "state_id", "status"),
)

CATEGORIES = EntityConfig(
    name="categories",
    label="Category",
    plural_label="Categories",
    model=Category,
    filters=(FilterSpec("name"),),
    create_required=("name",),
    update_required=("name",),
    keep_if_absent=("description",),
    echo_fields=("name", "description"),
)

EMPLOYERS = EntityConfig(
    name="employers",
    label="Employer",
    plural_label="Employers",
    model=Employer,
    filters=(
        FilterSpec("name"),
        FilterSpec("username"),
        FilterSpec("email"),
        FilterSpec("status", op="="),
    ),
    transforms=(ImageUrl("logo", "employer"),),
    create_required=("name", "username", "email", "password"),
    keep_if_absent=("logo",),
    echo_fields=("name", "email"),
    file_field="logo",
    password_field="password",
)

JOBS = EntityConfig(
    name="jobs",
    label="Job",
    plural_label="Jobs",
    model=Job,
    filters=(
        FilterSpec("job_title"),
        FilterSpec("state"),
        FilterSpec("city"),
        FilterSpec("status", op="="),
    ),
    create_required=("job_title", "posted_by", "employerID"),
    create_defaults={"status": "open"},
    keep_if_absent=("status",),
    echo_fields=("job_title", "employerID"),
)

NEWS = EntityConfig(
    name="news",
    label="News",
    plural_label="News",
    model=NewsBlog,
    filters=(FilterSpec("title"), FilterSpec("category"), FilterSpec("author")),
    transforms=(ImageUrl("blogimage", "blog"), ImageUrl("image_thumb", "blog/thumb")),
    create_required=("title", "slug"),
    create_defaults={"featured": 0, "likes": 0},
    keep_if_absent=("blogimage", "image_thumb"),
    echo_fields=("title", "slug"),
    file_field="blogimage",
)

ROLES = EntityConfig(
    name="roles",
    label="Role",
    plural_label="Roles",
    model=AdminRole,
    filters=(FilterSpec("name"),),
    create_required=("name",),
    update_required=("name",),
    keep_if_absent=("status",),
    echo_fields=("name", "status"),
)

STAFFS = EntityConfig(
    name="staffs",
    label="Staff",
    plural_label="Staff",
    model=Staff,
    filters=(
        FilterSpec("name"),
        FilterSpec("email"),
        FilterSpec("mobile"),
        FilterSpec("roleID", op="=", kind="int"),
        FilterSpec("status", op="=", kind="int"),
    ),
    transforms=(ImageUrl("image", "staff"),),
    create_required=("name", "email", "mobile"),
    create_defaults={"status": 1},
    keep_if_absent=("image", "status"),
    echo_fields=("name", "email"),
    file_field="image",
    password_field="password",
)

USERS = EntityConfig(
    name="users",
    label="Faculty user",
    plural_label="Faculty users",
    model=FacultyUser,
    filters=(FilterSpec("name"), FilterSpec("email"), FilterSpec("mobile")),
    transforms=(ImageUrl("image", "faculty"),),
    create_required=("name", "email", "mobile"),
    create_defaults={"status": 1},
    keep_if_absent=("image", "status"),
    echo_fields=("name", "email"),
    file_field="image",
)

ENTITIES: tuple[EntityConfig, ...] = (
    BANNERS,
    STATES,
    CITIES,
    CATEGORIES,
    EMPLOYERS,
    JOBS,
    NEWS,
    ROLES,
    STAFFS,
    USERS,
)
