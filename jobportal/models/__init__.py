from jobportal.models.banner import Banner
from jobportal.models.category import Category
from jobportal.models.city import City
from jobportal.models.employer import Employer
from jobportal.models.faculty_user import FacultyUser
from jobportal.models.job import Job
from jobportal.models.news import NewsBlog
from jobportal.models.role import AdminRole
from jobportal.models.staff import Staff
from jobportal.models.state import State

__all__ = [
    "AdminRole",
    "Banner",
    "Category",
    "City",
    "Employer",
    "FacultyUser",
    "Job",
    "NewsBlog",
    "Staff",
    "State",
]
