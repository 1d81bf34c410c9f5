"""
Check script for the YouTube Data API integration
Run this to verify your YouTube API key can ingest a playlist
"""
import os
import sys
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

# Check if API key is set
api_key = os.getenv('YOUTUBE_API_KEY')

if not api_key:
    print("❌ ERROR: YOUTUBE_API_KEY not found in .env file")
    print("\nPlease:")
    print("1. Create a .env file in the project root")
    print("2. Add your YouTube API key to the YOUTUBE_API_KEY variable")
    print("3. Get an API key from: https://console.cloud.google.com/apis/credentials")
    sys.exit(1)

print(f"✅ API Key found: {api_key[:10]}...{api_key[-4:]}")
print("\nTesting YouTube API connection...")

try:
    from myoozik.core.youtube_client import YouTubeClient, extract_playlist_id

    client = YouTubeClient(api_key=api_key)

    # Test video details
    print("\n📹 Testing video metadata fetch...")
    test_video_id = "dQw4w9WgXcQ"  # Rick Astley - Never Gonna Give You Up

    video = client.get_video_metadata(test_video_id)

    if video:
        print("✅ Video Metadata Retrieved Successfully!")
        print(f"   Title: {video['title']}")
        print(f"   Artist: {video['artist'] or '-'}")
        print(f"   Duration: {video['duration']}")
    else:
        print("❌ Failed to fetch video metadata")
        print("   Check your API key and quota")
        sys.exit(1)

    # Test playlist ingestion
    url = sys.argv[1] if len(sys.argv) > 1 else None
    if url:
        print("\n🎵 Testing playlist fetch...")
        playlist_id = extract_playlist_id(url)
        if not playlist_id:
            print(f"❌ No playlist id in {url}")
            sys.exit(1)

        playlist = client.get_playlist_metadata(playlist_id)
        if not playlist:
            print(f"❌ Playlist {playlist_id} not found (private or deleted?)")
            sys.exit(1)

        print("✅ Playlist Retrieved Successfully!")
        print(f"   Title: {playlist['title']}")
        print(f"   Songs: {len(playlist['videos'])}")
        for video in playlist['videos'][:5]:
            print(f"   - {video['title']} ({video['duration']})")

    print("\n" + "="*60)
    print("🎉 SUCCESS! YouTube API integration is working correctly!")
    print("="*60)
    print("\nYou can now:")
    print("1. Start the server: uvicorn myoozik.main:app --reload")
    print("2. Add a playlist: POST http://localhost:8000/api/v1/playlists")

except Exception as e:
    print(f"\n❌ ERROR: {e}")
    print("\nPossible issues:")
    print("1. Invalid API key")
    print("2. YouTube Data API v3 not enabled in Google Cloud Console")
    print("3. API quota exceeded")
    print("4. Network connection issues")
    import traceback
    traceback.print_exc()
    sys.exit(1)
