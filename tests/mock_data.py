"""Request/response bodies taken from the BriteVerify API documentation."""

EMAIL_VALID = {
    "email": {
        "address": "sales@validity.com",
        "account": "sales",
        "domain": "validity.com",
        "status": "valid",
        "connected": None,
        "disposable": False,
        "role_address": True,
    },
    "duration": 0.035602396,
}

EMAIL_INVALID = {
    "email": {
        "address": "invalidtest@validity.com",
        "account": "invalidtest",
        "domain": "validity.com",
        "status": "invalid",
        "connected": None,
        "disposable": False,
        "role_address": False,
        "error_code": "email_account_invalid",
        "error": "Email account invalid",
    },
    "duration": 0.291414519,
}

EMAIL_DISPOSABLE = {
    "email": {
        "address": "fake@mailinator.com",
        "account": "fake",
        "domain": "mailinator.com",
        "status": "accept_all",
        "connected": None,
        "disposable": True,
        "role_address": False,
    },
    "duration": 0.081746428,
}

PHONE_VALID = {
    "phone": {
        "number": "18009618205",
        "service_type": "land",
        "phone_location": None,
        "status": "valid",
        "errors": [],
    },
    "duration": 0.032635276,
}

PHONE_INVALID = {
    "phone": {
        "number": "135315",
        "service_type": None,
        "phone_location": None,
        "status": "invalid",
        "errors": ["invalid_phone_number"],
    },
    "duration": 0.056220326,
}

ADDRESS_VALID = {
    "address": {
        "address1": "4010 W Boy Scout Blvd Ste 1100",
        "address2": " ",
        "city": "Tampa",
        "state": "FL",
        "zip": "33607-5796",
        "status": "valid",
        "errors": [],
        "corrected": False,
    },
    "duration": 0.108034192,
}

ACCOUNT_BALANCE = {
    "credits": 2165,
    "credits_in_reserve": 500,
    "recorded_on": "2021-07-27T21:10:10.000+0000",
}

CONTACT = {
    "email": "hello@example.com",
    "phone": "4444444444",
    "address": {
        "address1": "200 Clarendon St",
        "address2": "Unit 2200",
        "city": "Boston",
        "state": "MA",
        "zip": "02115",
    },
}

JOB_ID = "52233c90-3dbe-47d4-910b-1fa9d1e8829c"


def list_state(state, job_id=JOB_ID, page_count=0, progress=0, errors=None, **extra):
    data = {
        "created_at": "08-10-2021 05:06 pm",
        "expiration_date": None,
        "id": job_id,
        "page_count": page_count,
        "progress": progress,
        "results_path": None,
        "state": state,
        "total_verified": 0,
        "total_verified_emails": 0,
        "total_verified_phones": 0,
    }
    if errors is not None:
        data["errors"] = errors
    data.update(extra)
    return data


def crud_response(state, job_id=JOB_ID, message="created new list"):
    return {"status": "success", "message": message, "list": list_state(state, job_id)}


LIST_STATE_COMPLETE = {
    "created_at": "08-10-2021 05:06 pm",
    "expiration_date": "08-17-2021 05:07 pm",
    "id": JOB_ID,
    "page_count": 1,
    "progress": 100,
    "results_path": f"https://bulk-api.briteverify.com/api/v3/lists/{JOB_ID}/export/1",
    "state": "complete",
    "total_verified": 32,
    "total_verified_emails": 16,
    "total_verified_phones": 16,
}

LIST_STATE_TERMINATED = list_state(
    "terminated",
    page_count=None,
    errors=[{"code": "import_error", "message": "user terminated at 08-10-2021 04:07PM"}],
)

LIST_STATE_WITH_EXTERNAL_ID = {
    "account_external_id": 12345,
    "created_at": "08-10-2021 04:26 pm",
    "expiration_date": "08-17-2021 04:26 pm",
    "id": "c7995898-1368-4aa4-9427-236f25192b30",
    "page_count": 1,
    "progress": 100,
    "results_path": "https://bulk-api.briteverify.com/api/v3/accounts/12345/lists/c7995898-1368-4aa4-9427-236f25192b30/export/1",
    "state": "complete",
    "total_verified": 2,
    "total_verified_emails": 1,
    "total_verified_phones": 1,
}

LIST_NOT_FOUND = {"message": "No matching list found", "status": "not_found"}

RESULTS_CONTACTS = {
    "num_pages": 1,
    "results": [
        {
            "address": {
                "address1": "200 Clarendon St Ste 2200",
                "address2": None,
                "city": "Boston",
                "corrected": "true",
                "secondary_status": None,
                "state": "MA",
                "status": "valid",
                "zip": "02116-5051",
            },
            "email": {"email": "sales@validity.com", "secondary_status": "role_address", "status": "valid"},
            "phone": {
                "phone": "18009618205",
                "phone_location": None,
                "phone_service_type": "land",
                "secondary_status": None,
                "status": "valid",
            },
        },
        {
            "email": {"email": "goodbye@example.com", "secondary_status": "email_domain_invalid", "status": "invalid"},
            "phone": {
                "phone": "5555555555",
                "phone_location": None,
                "phone_service_type": None,
                "secondary_status": "invalid_phone_number",
                "status": "invalid",
            },
        },
    ],
    "status": "success",
}

RESULTS_EMAILS = {
    "num_pages": "2",
    "results": [
        {"email": "invalid@test.com", "secondary_status": "email_account_invalid", "status": "invalid"},
        {"email": "unknown@test.com", "secondary_status": None, "status": "unknown"},
        {"email": "valid@test.com", "secondary_status": "role_address", "status": "valid"},
        {"email": "accept_all@test.com", "secondary_status": "role_address", "status": "accept_all"},
    ],
    "status": "success",
}

LISTS_BY_PAGE = {
    "message": "Page 1 of 2",
    "lists": [
        list_state("complete", job_id="b3ef8e0e-9e6e-4b4d-9d6f-6e3c0b4f5a11", page_count=1, progress=100),
        list_state("open", job_id="c5ef0f4c-3b0e-4e93-8f1e-1f6f4f1a2b22"),
    ],
}
