from typing import Any
from app.core.graphql import GraphQLClient

USER_FIELDS = """
    id
    name
    email
    cpf
    birthDate
    photoUrl
    role
    phoneCountryCode
    phoneAreaCode
    phoneNumber
    createdAt
"""

MUTATION_LOGIN = f"""
mutation Login($input: LoginInput!) {{
  login(input: $input) {{
    token
    user {{ {USER_FIELDS} }}
  }}
}}
"""

MUTATION_REGISTER = f"""
mutation Register($input: RegisterInput!) {{
  register(input: $input) {{
    token
    user {{ {USER_FIELDS} }}
  }}
}}
"""

QUERY_ME = f"""
query Me {{
  me {{ {USER_FIELDS} }}
}}
"""

MUTATION_UPDATE_PHONE = f"""
mutation UpdatePhone($phoneCountryCode: String!, $phoneAreaCode: String!, $phoneNumber: String!) {{
  updatePhone(phoneCountryCode: $phoneCountryCode, phoneAreaCode: $phoneAreaCode, phoneNumber: $phoneNumber) {{
    {USER_FIELDS}
  }}
}}
"""

MUTATION_UPDATE_PROFILE_PHOTO = """
mutation UpdateProfilePhoto($photoBase64: String!) {
  updateProfilePhoto(photoBase64: $photoBase64) {
    id
    name
    photoUrl
  }
}
"""


async def login(gql: GraphQLClient, email: str, password: str) -> dict[str, Any] | None:
    data = await gql.mutate(MUTATION_LOGIN, {"input": {"email": email, "password": password}})
    return data.get("login")


async def register(gql: GraphQLClient, payload: dict[str, Any]) -> dict[str, Any] | None:
    data = await gql.mutate(MUTATION_REGISTER, {"input": payload})
    return data.get("register")


async def me(gql: GraphQLClient, token: str) -> dict[str, Any] | None:
    data = await gql.query(QUERY_ME, token=token)
    return data.get("me")


async def update_phone(gql: GraphQLClient, token: str, country_code: str, area_code: str,
                       number: str) -> dict[str, Any] | None:
    data = await gql.mutate(
        MUTATION_UPDATE_PHONE,
        {"phoneCountryCode": country_code, "phoneAreaCode": area_code, "phoneNumber": number},
        token=token,
    )
    return data.get("updatePhone")


async def update_profile_photo(gql: GraphQLClient, token: str, photo_base64: str) -> dict[str, Any] | None:
    data = await gql.mutate(MUTATION_UPDATE_PROFILE_PHOTO, {"photoBase64": photo_base64}, token=token)
    return data.get("updateProfilePhoto")
