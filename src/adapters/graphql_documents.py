"""GraphQL documents sent by the GraphQL service adapter.

Fragments are shared so every operation returns items in the same shape the
mapper expects.
"""

from __future__ import annotations

FILTER_FRAGMENT = """
fragment filterFragment on Filter {
  id
  name
  filterType
}
"""

SOURCE_FRAGMENT = (
    FILTER_FRAGMENT
    + """
fragment sourceFragment on Source {
  id
  name
  type
  blockchainAddress
  applicableFilters {
    ...filterFragment
  }
}
"""
)

SOURCE_GROUP_FRAGMENT = (
    SOURCE_FRAGMENT
    + """
fragment sourceGroupFragment on SourceGroup {
  id
  name
  sources {
    ...sourceFragment
  }
}
"""
)

EMAIL_TARGET_FRAGMENT = """
fragment emailTargetFragment on EmailTarget {
  id
  name
  emailAddress
  isConfirmed
}
"""

SMS_TARGET_FRAGMENT = """
fragment smsTargetFragment on SmsTarget {
  id
  name
  phoneNumber
  isConfirmed
}
"""

TELEGRAM_TARGET_FRAGMENT = """
fragment telegramTargetFragment on TelegramTarget {
  id
  name
  telegramId
  isConfirmed
  confirmationUrl
}
"""

TARGET_GROUP_FRAGMENT = (
    EMAIL_TARGET_FRAGMENT
    + SMS_TARGET_FRAGMENT
    + TELEGRAM_TARGET_FRAGMENT
    + """
fragment targetGroupFragment on TargetGroup {
  id
  name
  emailTargets {
    ...emailTargetFragment
  }
  smsTargets {
    ...smsTargetFragment
  }
  telegramTargets {
    ...telegramTargetFragment
  }
}
"""
)

ALERT_FRAGMENT = (
    SOURCE_GROUP_FRAGMENT
    + TARGET_GROUP_FRAGMENT
    + """
fragment alertFragment on Alert {
  id
  name
  groupName
  filterOptions
  filter {
    ...filterFragment
  }
  sourceGroup {
    ...sourceGroupFragment
  }
  targetGroup {
    ...targetGroupFragment
  }
}
"""
)

USER_FRAGMENT = """
fragment userFragment on User {
  email
  emailConfirmed
  roles
  authorization {
    token
    expiry
  }
}
"""

# --- Login ---

BEGIN_LOG_IN_BY_TRANSACTION = """
mutation beginLogInByTransaction($walletAddress: String!, $walletBlockchain: WalletBlockchain!, $dappAddress: String!) {
  beginLogInByTransaction(beginLogInByTransactionInput: {walletAddress: $walletAddress, walletBlockchain: $walletBlockchain, dappAddress: $dappAddress}) {
    nonce
  }
}
"""

COMPLETE_LOG_IN_BY_TRANSACTION = (
    USER_FRAGMENT
    + """
mutation completeLogInByTransaction($walletAddress: String!, $walletBlockchain: WalletBlockchain!, $dappAddress: String!, $randomUuid: String!, $transactionSignature: String!) {
  completeLogInByTransaction(completeLogInByTransactionInput: {walletAddress: $walletAddress, walletBlockchain: $walletBlockchain, dappAddress: $dappAddress, randomUuid: $randomUuid, transactionSignature: $transactionSignature}) {
    ...userFragment
  }
}
"""
)

LOG_IN_FROM_DAPP = (
    USER_FRAGMENT
    + """
mutation logInFromDapp($walletPublicKey: String!, $dappAddress: String!, $timestamp: Long!, $signature: String!) {
  logInFromDapp(dappLogInInput: {walletPublicKey: $walletPublicKey, dappAddress: $dappAddress, timestamp: $timestamp}, signature: $signature) {
    ...userFragment
  }
}
"""
)

# --- Collections ---

GET_ALERTS = (
    ALERT_FRAGMENT
    + """
query getAlerts {
  alert {
    ...alertFragment
  }
}
"""
)

GET_SOURCES = (
    SOURCE_FRAGMENT
    + """
query getSources {
  source {
    ...sourceFragment
  }
}
"""
)

GET_SOURCE_GROUPS = (
    SOURCE_GROUP_FRAGMENT
    + """
query getSourceGroups {
  sourceGroup {
    ...sourceGroupFragment
  }
}
"""
)

GET_TARGET_GROUPS = (
    TARGET_GROUP_FRAGMENT
    + """
query getTargetGroups {
  targetGroup {
    ...targetGroupFragment
  }
}
"""
)

GET_EMAIL_TARGETS = (
    EMAIL_TARGET_FRAGMENT
    + """
query getEmailTargets {
  emailTarget {
    ...emailTargetFragment
  }
}
"""
)

GET_SMS_TARGETS = (
    SMS_TARGET_FRAGMENT
    + """
query getSmsTargets {
  smsTarget {
    ...smsTargetFragment
  }
}
"""
)

GET_TELEGRAM_TARGETS = (
    TELEGRAM_TARGET_FRAGMENT
    + """
query getTelegramTargets {
  telegramTarget {
    ...telegramTargetFragment
  }
}
"""
)

# --- Mutations ---

CREATE_ALERT = (
    ALERT_FRAGMENT
    + """
mutation createAlert($name: String!, $sourceGroupId: String!, $filterId: String!, $filterOptions: String!, $targetGroupId: String!, $groupName: String!) {
  createAlert(alertInput: {name: $name, sourceGroupId: $sourceGroupId, filterId: $filterId, filterOptions: $filterOptions, targetGroupId: $targetGroupId, groupName: $groupName}) {
    ...alertFragment
  }
}
"""
)

DELETE_ALERT = """
mutation deleteAlert($id: String!) {
  deleteAlert(alertId: $id) {
    id
  }
}
"""

CREATE_SOURCE = (
    SOURCE_FRAGMENT
    + """
mutation createSource($name: String!, $blockchainAddress: String!, $type: SourceType!) {
  createSource(createSourceInput: {name: $name, blockchainAddress: $blockchainAddress, type: $type}) {
    ...sourceFragment
  }
}
"""
)

CREATE_SOURCE_GROUP = (
    SOURCE_GROUP_FRAGMENT
    + """
mutation createSourceGroup($name: String!, $sourceIds: [String!]!) {
  createSourceGroup(sourceGroupInput: {name: $name, sourceIds: $sourceIds}) {
    ...sourceGroupFragment
  }
}
"""
)

UPDATE_SOURCE_GROUP = (
    SOURCE_GROUP_FRAGMENT
    + """
mutation updateSourceGroup($id: String!, $name: String!, $sourceIds: [String!]!) {
  updateSourceGroup(sourceGroupInput: {id: $id, name: $name, sourceIds: $sourceIds}) {
    ...sourceGroupFragment
  }
}
"""
)

DELETE_SOURCE_GROUP = """
mutation deleteSourceGroup($id: String!) {
  deleteSourceGroup(sourceGroupInput: {id: $id}) {
    id
  }
}
"""

CREATE_TARGET_GROUP = (
    TARGET_GROUP_FRAGMENT
    + """
mutation createTargetGroup($name: String!, $emailTargetIds: [String!]!, $smsTargetIds: [String!]!, $telegramTargetIds: [String!]!) {
  createTargetGroup(targetGroupInput: {name: $name, emailTargetIds: $emailTargetIds, smsTargetIds: $smsTargetIds, telegramTargetIds: $telegramTargetIds}) {
    ...targetGroupFragment
  }
}
"""
)

UPDATE_TARGET_GROUP = (
    TARGET_GROUP_FRAGMENT
    + """
mutation updateTargetGroup($id: String!, $name: String!, $emailTargetIds: [String!]!, $smsTargetIds: [String!]!, $telegramTargetIds: [String!]!) {
  updateTargetGroup(targetGroupInput: {id: $id, name: $name, emailTargetIds: $emailTargetIds, smsTargetIds: $smsTargetIds, telegramTargetIds: $telegramTargetIds}) {
    ...targetGroupFragment
  }
}
"""
)

DELETE_TARGET_GROUP = """
mutation deleteTargetGroup($id: String!) {
  deleteTargetGroup(targetGroupInput: {id: $id}) {
    id
  }
}
"""

CREATE_EMAIL_TARGET = (
    EMAIL_TARGET_FRAGMENT
    + """
mutation createEmailTarget($name: String!, $value: String!) {
  createEmailTarget(createTargetInput: {name: $name, value: $value}) {
    ...emailTargetFragment
  }
}
"""
)

CREATE_SMS_TARGET = (
    SMS_TARGET_FRAGMENT
    + """
mutation createSmsTarget($name: String!, $value: String!) {
  createSmsTarget(createTargetInput: {name: $name, value: $value}) {
    ...smsTargetFragment
  }
}
"""
)

CREATE_TELEGRAM_TARGET = (
    TELEGRAM_TARGET_FRAGMENT
    + """
mutation createTelegramTarget($name: String!, $value: String!) {
  createTelegramTarget(createTargetInput: {name: $name, value: $value}) {
    ...telegramTargetFragment
  }
}
"""
)

SEND_EMAIL_TARGET_VERIFICATION_REQUEST = """
mutation sendEmailTargetVerificationRequest($targetId: String!) {
  sendEmailTargetVerificationRequest(sendTargetConfirmationRequestInput: {targetId: $targetId}) {
    id
  }
}
"""

GET_CONFIGURATION_FOR_DAPP = """
query getConfigurationForDapp($dappAddress: String!) {
  configurationForDapp(getConfigurationForDappInput: {dappAddress: $dappAddress}) {
    supportedSmsCountryCodes
  }
}
"""

GET_TOPICS = """
query getTopics {
  topics {
    topicName
    targetCollections
    targetTemplate
  }
}
"""

BROADCAST_MESSAGE = """
mutation broadcastMessage($topicName: String!, $targetTemplates: [KeyValuePairOfTargetTypeAndStringInput!], $timestamp: Long!, $variables: [KeyValuePairOfStringAndStringInput!], $walletBlockchain: WalletBlockchain!, $signature: String!) {
  broadcastMessage(broadcastMessageInput: {topicName: $topicName, targetTemplates: $targetTemplates, timestamp: $timestamp, variables: $variables, walletBlockchain: $walletBlockchain}, signature: $signature) {
    id
  }
}
"""
