"""Google Search paid ads conversions: leads carrying a click id that became applications."""

from conversion_report.models.watermark import RunWindow
from conversion_report.reports.base import BaseReport, Column

# Lead Post fields
GCLID = "URL_GCLID__c"
OPPORTUNITY = "Opportunity__c"
URL_DETAILS = "URL_Details__c"
STAGE_NAME = "Opportunity__r.StageName"
APPLICATION_DATE = "Opportunity__r.Application_Date__c"

TEST_FIRST_NAME = "AAUTest"


class GoogleSearchAdsConversionsReport(BaseReport):
    """
    Applicants whose lead post carries a Google click id.
    An applicant can have several lead posts (e.g. MMI and OLAP marketing codes)
    tied to one opportunity, so rows are deduplicated on the opportunity.
    Leads that came in through the legacy get-started forms are dropped.
    """

    report_type = "googleSearchAdsConversions"
    dedup_field = OPPORTUNITY
    exclude_url_field = URL_DETAILS
    exclude_url_pattern = r"https?://getstarted\."
    columns = (
        Column(GCLID, "Google Click ID"),
        Column(STAGE_NAME, "Stage Name"),
        Column(APPLICATION_DATE, "Application Date"),
    )

    def build_query(self, window: RunWindow) -> str:
        return f"""
          SELECT
            Id, {GCLID}, {OPPORTUNITY}, Email__c, Marketing_Code__c, {URL_DETAILS}, Advertising_Source__c, CreatedDate, {STAGE_NAME}, {APPLICATION_DATE}
          FROM
            Lead_Post__c
          WHERE
            {GCLID} != null
            AND {OPPORTUNITY} != null
            AND {APPLICATION_DATE} != null
            AND CreatedDate > {window.lower_bound}
            AND CreatedDate < {window.upper_bound}
            AND First_Name__c != '{TEST_FIRST_NAME}'
          ORDER BY
            {APPLICATION_DATE} DESC
          """
