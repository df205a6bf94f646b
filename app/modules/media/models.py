# Supabase Storage buckets: profile_pictures, user_videos
# This file documents the expected storage setup
# Actual operations are handled via Supabase SDK in supabase_storage.py

"""
Expected Supabase Storage buckets (limits mirrored in app/config/storage_config.py):

profile_pictures:
- public: true
- file_size_limit: 5242880 (5MB)
- allowed_mime_types: image/jpeg, image/png, image/gif, image/webp

user_videos (also holds gallery images):
- public: true
- file_size_limit: 52428800 (50MB)
- allowed_mime_types: video/mp4, video/webm, video/quicktime, video/x-msvideo

Object names are <user_id>/<filename>. Storage policies on storage.objects allow
select to everyone and insert/update/delete only when
auth.uid()::text = (storage.foldername(name))[1].

Public URLs look like:
<supabase_url>/storage/v1/object/public/<bucket>/<user_id>/<filename>
"""
