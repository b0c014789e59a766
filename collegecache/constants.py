"""Endpoints and the fixed set of states served by the AICTE dashboard."""

INDEX_URL_TEMPLATE = (
    "http://www.aicte-india.org/dashboard/pages/php/approvedinstituteserver.php"
    "?method=fetchdata&year=2016-2017&program=1&level=1&institutiontype=1"
    "&Women=1&Minority=1&state={state}&course="
)

DETAIL_URL_TEMPLATE = (
    "http://www.aicte-india.org/dashboard/pages/approved.php"
    "?aicteid={record_id}&course=&year=2016-2017"
)

# Seconds to wait before retrying a failed request.
RETRY_DELAY = 20.0

# Number of detail pages between progress log lines.
PROGRESS_INTERVAL = 10

# University value the dashboard shows when a college has none.
UNIVERSITY_PLACEHOLDER = "None"

# Taken from the dashboard's state selector. 'Orissa' is omitted: it returns
# no results and has been replaced by 'Odisha'.
STATES: tuple[str, ...] = (
    "Andaman and Nicobar Islands",
    "Andhra Pradesh",
    "Arunachal Pradesh",
    "Assam",
    "Bihar",
    "Chandigarh",
    "Chhattisgarh",
    "Dadra and Nagar Haveli",
    "Daman and Diu",
    "Delhi",
    "Goa",
    "Gujarat",
    "Haryana",
    "Himachal Pradesh",
    "Jammu and Kashmir",
    "Jharkhand",
    "Karnataka",
    "Kerala",
    "Madhya Pradesh",
    "Maharashtra",
    "Manipur",
    "Meghalaya",
    "Mizoram",
    "Nagaland",
    "Odisha",
    "Puducherry",
    "Punjab",
    "Rajasthan",
    "Sikkim",
    "Tamil Nadu",
    "Telangana",
    "Tripura",
    "Uttar Pradesh",
    "Uttarakhand",
    "West Bengal",
)
