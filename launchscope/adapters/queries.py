"""GraphQL documents for the Product Hunt v2 API."""

_POST_FIELDS = """
          id
          name
          tagline
          description
          url
          thumbnail {
            url
          }
          votesCount
          commentsCount
          createdAt
          topics {
            edges {
              node {
                id
                name
                slug
              }
            }
          }
          user {
            id
            name
            username
            headline
            profileImage
          }
"""

_USER_FIELDS = """
      id
      name
      username
      headline
      profileImage
      websiteUrl
      twitterUsername
      productsCount
      followersCount
"""

_PAGE_INFO = """
      pageInfo {
        hasNextPage
        endCursor
      }
"""

SEARCH_PRODUCTS_QUERY = f"""
  query SearchProducts($query: String!, $first: Int!, $after: String) {{
    search(query: $query, types: [POST], first: $first, after: $after) {{
      edges {{
        node {{
          ... on Post {{{_POST_FIELDS}
          }}
        }}
      }}{_PAGE_INFO}
    }}
  }}
"""

GET_TRENDING_PRODUCTS_QUERY = f"""
  query GetTrendingProducts($first: Int!, $after: String) {{
    posts(first: $first, after: $after) {{
      edges {{
        node {{{_POST_FIELDS}
        }}
      }}{_PAGE_INFO}
    }}
  }}
"""

GET_TOPICS_QUERY = """
  query GetTopics {
    topics {
      edges {
        node {
          id
          name
          slug
          description
        }
      }
    }
  }
"""

SEARCH_USERS_QUERY = f"""
  query SearchUsers($query: String!, $first: Int!) {{
    search(first: $first, query: $query, types: [USER]) {{
      edges {{
        node {{
          ... on User {{{_USER_FIELDS}
          }}
        }}
      }}
    }}
  }}
"""

GET_USER_BY_USERNAME_QUERY = f"""
  query GetUserByUsername($username: String!) {{
    user(username: $username) {{{_USER_FIELDS}
    }}
  }}
"""

GET_UPCOMING_PRODUCTS_QUERY = f"""
  query GetUpcomingProducts($first: Int!, $after: String) {{
    upcoming(first: $first, after: $after) {{
      edges {{
        node {{{_POST_FIELDS}
        }}
      }}{_PAGE_INFO}
    }}
  }}
"""

GET_LAUNCH_ARCHIVE_QUERY = f"""
  query GetLaunchArchive($first: Int!, $after: String, $postedAfter: DateTime, $postedBefore: DateTime) {{
    posts(first: $first, after: $after, postedAfter: $postedAfter, postedBefore: $postedBefore) {{
      edges {{
        node {{{_POST_FIELDS}
        }}
      }}{_PAGE_INFO}
    }}
  }}
"""

GET_PRODUCTS_BY_TOPIC_QUERY = f"""
  query GetProductsByTopic($topicSlug: String!, $first: Int!, $after: String) {{
    topic(slug: $topicSlug) {{
      id
      name
      description
      products: postsCollection(first: $first, after: $after) {{
        edges {{
          node {{{_POST_FIELDS}
          }}
        }}{_PAGE_INFO}
      }}
    }}
  }}
"""
