"""Fixed option sets used by the registration form."""

# "2" is intentionally not offered.
TEAM_SIZE_OPTIONS = ("1", "3", "4", "5", "6")

GENDER_OPTIONS = ("男", "女", "其他")

GRADE_OPTIONS = ("一", "二", "三")

GRADE_LABELS = {
    "一": "高中職一",
    "二": "高中職二",
    "三": "高中職三",
}

TSHIRT_SIZE_OPTIONS = ("S", "M", "L", "XL", "2L", "3L", "4L")

TSHIRT_SIZE_CHART_URL = "https://www.artshirt.com.tw/style-detail/1203/"

MAX_ACCOMPANYING_PERSONS = 2

MAX_EXHIBITORS = 50

MIN_EMERGENCY_CONTACTS = 1
