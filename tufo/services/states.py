"""US state names and postal codes."""

STATE_CODES = {
    "TX": "Texas",
    "CA": "California",
    "NY": "New York",
    "FL": "Florida",
    "CO": "Colorado",
    "WA": "Washington",
    "OR": "Oregon",
    "UT": "Utah",
    "AZ": "Arizona",
    "NV": "Nevada",
    "NM": "New Mexico",
    "WY": "Wyoming",
    "MT": "Montana",
    "ID": "Idaho",
    "NC": "North Carolina",
    "SC": "South Carolina",
    "GA": "Georgia",
    "AL": "Alabama",
    "TN": "Tennessee",
    "KY": "Kentucky",
    "VA": "Virginia",
    "WV": "West Virginia",
    "OH": "Ohio",
    "IN": "Indiana",
    "IL": "Illinois",
    "MI": "Michigan",
    "WI": "Wisconsin",
    "MN": "Minnesota",
    "IA": "Iowa",
    "MO": "Missouri",
    "AR": "Arkansas",
    "LA": "Louisiana",
    "MS": "Mississippi",
    "OK": "Oklahoma",
    "KS": "Kansas",
    "NE": "Nebraska",
    "SD": "South Dakota",
    "ND": "North Dakota",
    "PA": "Pennsylvania",
    "NJ": "New Jersey",
    "DE": "Delaware",
    "MD": "Maryland",
    "MA": "Massachusetts",
    "CT": "Connecticut",
    "RI": "Rhode Island",
    "VT": "Vermont",
    "NH": "New Hampshire",
    "ME": "Maine",
    "AK": "Alaska",
    "HI": "Hawaii",
}

# Import order for the all-states batch
US_STATES = sorted(STATE_CODES.values())
